from collections import defaultdict

from core.exceptions import CycleDetectedError
from core.logger import logger
from database.mappers import EmployeeMapper
from database.repositories.employee_repo import EmployeeRepo
from domain.entities import EmployeeNode, EmployeeRecord


class HierarchyAssembler:
    """
    Turns flat employee rows into reporting trees.

    The walk is an explicit-stack depth-first traversal with a visited set, so
    deep hierarchies cannot exhaust the interpreter stack and a cyclic manager
    graph raises CycleDetectedError instead of looping forever.

    Child lookup:
    - preload=True: the whole table is read once and indexed by manager id
    - preload=False: one fetch_children query per expanded employee

    Both produce the same trees, siblings in store order (by employee_id).
    """

    def __init__(self, repo: EmployeeRepo, preload: bool = True):
        self.repo = repo
        self.preload = preload
        self._children_by_manager: dict[int | None, list[EmployeeRecord]] | None = None

    async def _load(self) -> None:
        records = await self.repo.fetch_all()
        children_by_manager: dict[int | None, list[EmployeeRecord]] = defaultdict(list)
        for record in records:
            children_by_manager[record.manager_employee_id].append(record)
        self._children_by_manager = children_by_manager
        logger.info(f'Hierarchy preloaded ({len(records)} employees)')

    async def _children(self, manager_id: int) -> list[EmployeeRecord]:
        if not self.preload:
            return await self.repo.fetch_children(manager_id)
        if self._children_by_manager is None:
            await self._load()
        return self._children_by_manager.get(manager_id, [])

    async def build(self, manager_id: int) -> list[EmployeeNode]:
        """Every employee reporting to ``manager_id``, each with its own subtree."""
        visited = {manager_id}
        roots: list[EmployeeNode] = []
        stack: list[tuple[int, list[EmployeeNode]]] = [(manager_id, roots)]

        while stack:
            current_id, siblings = stack.pop()
            for record in await self._children(current_id):
                if record.employee_id in visited:
                    logger.error(
                        f'Cycle in manager graph: employee ID={record.employee_id} '
                        f'reached again under manager ID={current_id}'
                    )
                    raise CycleDetectedError(record.employee_id)
                visited.add(record.employee_id)

                node = EmployeeMapper.to_node(record)
                siblings.append(node)
                stack.append((record.employee_id, node.managed_employees))

        return roots

    async def expand(self, record: EmployeeRecord) -> EmployeeNode:
        """``record`` as a tree node with its full subtree attached."""
        node = EmployeeMapper.to_node(record)
        node.managed_employees = await self.build(record.employee_id)
        return node
