import database.models as orm
import domain.entities as domain


class EmployeeMapper:
    @staticmethod
    def to_domain(model: orm.Employee) -> domain.EmployeeRecord:
        return domain.EmployeeRecord(
            employee_id=model.employee_id,
            full_name=model.full_name,
            title=model.title,
            manager_employee_id=model.manager_employee_id,
        )

    @staticmethod
    def to_orm(entity: domain.EmployeeUpsert) -> orm.Employee:
        return orm.Employee(
            full_name=entity.full_name,
            title=entity.title,
            manager_employee_id=entity.manager_employee_id,
        )

    @staticmethod
    def to_node(record: domain.EmployeeRecord) -> domain.EmployeeNode:
        return domain.EmployeeNode(
            employee_id=record.employee_id,
            full_name=record.full_name,
            title=record.title,
        )
