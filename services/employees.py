"""
Employee Service - personnel, rôles et heures supplémentaires
"""
import logging
from collections import Counter
from datetime import date
from typing import Dict, List, Optional
from sqlalchemy.orm import Session

from database import Employee, OvertimeHour
from app.core import EmployeeRole
from services.common import matches, money, month_bounds

logger = logging.getLogger(__name__)


class EmployeeService:
    """Gestion du personnel"""

    def __init__(self, db: Session):
        self.db = db

    def list_employees(self, search: Optional[str] = None) -> List[Dict]:
        employees = self.db.query(Employee).order_by(
            Employee.first_name.asc(), Employee.id.asc()
        ).all()
        employees = [
            e for e in employees
            if matches(search, e.first_name, e.last_name, e.email, EmployeeRole(e.role).label)
        ]
        return [self._serialize(e) for e in employees]

    def get_employee(self, employee_id: int) -> Optional[Dict]:
        employee = self._get(employee_id)
        return self._serialize(employee) if employee else None

    def create_employee(self, data: Dict) -> Dict:
        employee = Employee(**self._fields(data))
        self.db.add(employee)
        self.db.commit()
        self.db.refresh(employee)
        logger.info(f"Employee created: {employee.id} ({employee.first_name} {employee.last_name})")
        return self._serialize(employee)

    def update_employee(self, employee_id: int, data: Dict) -> Optional[Dict]:
        employee = self._get(employee_id)
        if not employee:
            return None
        for key, value in self._fields(data).items():
            setattr(employee, key, value)
        self.db.commit()
        self.db.refresh(employee)
        return self._serialize(employee)

    def toggle_active(self, employee_id: int) -> Optional[Dict]:
        employee = self._get(employee_id)
        if not employee:
            return None
        employee.is_active = not employee.is_active
        self.db.commit()
        self.db.refresh(employee)
        logger.info(f"Employee {employee_id} active={employee.is_active}")
        return self._serialize(employee)

    def delete_employee(self, employee_id: int) -> bool:
        employee = self._get(employee_id)
        if not employee:
            return False
        self.db.delete(employee)
        self.db.commit()
        return True

    def role_stats(self) -> Dict[str, int]:
        """Nombre d'employés actifs par rôle"""
        active = self.db.query(Employee.role).filter(Employee.is_active.is_(True)).all()
        return dict(Counter(role for (role,) in active))

    # ------------------------------------------------------------------
    # Heures supplémentaires
    # ------------------------------------------------------------------

    def list_overtime(self, employee_id: int) -> Optional[List[OvertimeHour]]:
        if not self._get(employee_id):
            return None
        return self.db.query(OvertimeHour).filter(
            OvertimeHour.employee_id == employee_id
        ).order_by(OvertimeHour.date.desc(), OvertimeHour.id.desc()).all()

    def add_overtime(self, employee_id: int, data: Dict) -> Optional[OvertimeHour]:
        """total_amount = hours_worked * hourly_rate"""
        if not self._get(employee_id):
            return None
        entry = OvertimeHour(
            employee_id=employee_id,
            date=data['date'],
            hours_worked=data['hours_worked'],
            hourly_rate=data['hourly_rate'],
            total_amount=money(data['hours_worked'] * data['hourly_rate']),
            description=data.get('description') or None,
        )
        self.db.add(entry)
        self.db.commit()
        self.db.refresh(entry)
        logger.info(f"Overtime added for employee {employee_id}: {entry.hours_worked}h = {entry.total_amount}")
        return entry

    def delete_overtime(self, employee_id: int, overtime_id: int) -> bool:
        entry = self.db.query(OvertimeHour).filter(
            OvertimeHour.id == overtime_id,
            OvertimeHour.employee_id == employee_id
        ).first()
        if not entry:
            return False
        self.db.delete(entry)
        self.db.commit()
        return True

    def overtime_summary(self, employee_id: int, year: Optional[int] = None,
                         month: Optional[int] = None) -> Optional[Dict]:
        """
        Total des heures supplémentaires d'un mois (mois courant par défaut)
        """
        if not self._get(employee_id):
            return None

        today = date.today()
        year = year or today.year
        month = month or today.month
        if not 1 <= month <= 12:
            raise ValueError(f"Invalid month: {month}")

        start_date, end_date = month_bounds(year, month)
        entries = self.db.query(OvertimeHour).filter(
            OvertimeHour.employee_id == employee_id,
            OvertimeHour.date >= start_date,
            OvertimeHour.date <= end_date
        ).order_by(OvertimeHour.date.desc(), OvertimeHour.id.desc()).all()

        return {
            'employee_id': employee_id,
            'year': year,
            'month': month,
            'total_amount': money(sum(e.total_amount or 0.0 for e in entries)),
            'entries': entries,
        }

    def _get(self, employee_id: int) -> Optional[Employee]:
        return self.db.query(Employee).filter(Employee.id == employee_id).first()

    def _fields(self, data: Dict) -> Dict:
        fields = dict(data)
        fields['role'] = EmployeeRole(data.get('role') or EmployeeRole.USER).value
        for key in ('email', 'phone', 'address', 'department', 'position'):
            fields[key] = fields.get(key) or None
        return fields

    def _serialize(self, employee: Employee) -> Dict:
        role = EmployeeRole(employee.role)
        return {
            'id': employee.id,
            'first_name': employee.first_name,
            'last_name': employee.last_name,
            'email': employee.email,
            'phone': employee.phone,
            'address': employee.address,
            'department': employee.department,
            'position': employee.position,
            'salary': employee.salary,
            'hire_date': employee.hire_date,
            'role': role,
            'role_label': role.label,
            'is_active': bool(employee.is_active),
        }
