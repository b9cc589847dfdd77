import json

from fastapi import Response, status

from domain.entities import EmployeeNode


def _text(value: str) -> str:
    return json.dumps(value, ensure_ascii=False)


def encode_employees(nodes: list[EmployeeNode]) -> str:
    """JSON text for a list of employee trees, same shape as ``EmployeeResponse``.

    Written with an explicit stack: reporting chains of any depth encode
    without touching the interpreter or pydantic recursion limits.
    """
    parts: list[str] = ['[']
    stack: list[EmployeeNode | str] = [']']
    for i in reversed(range(len(nodes))):
        stack.append(nodes[i])
        if i:
            stack.append(',')

    while stack:
        item = stack.pop()
        if isinstance(item, str):
            parts.append(item)
            continue

        parts.append(
            f'{{"employee_id":{int(item.employee_id)},'
            f'"full_name":{_text(item.full_name)},'
            f'"title":{_text(item.title)},'
            f'"managed_employees":['
        )
        stack.append(']}')
        reports = item.managed_employees
        for i in reversed(range(len(reports))):
            stack.append(reports[i])
            if i:
                stack.append(',')

    return ''.join(parts)


def encode_employee(node: EmployeeNode) -> str:
    # A one-element list minus its brackets
    return encode_employees([node])[1:-1]


def json_response(content: str) -> Response:
    return Response(content=content, status_code=status.HTTP_200_OK, media_type='application/json')
