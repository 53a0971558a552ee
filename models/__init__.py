from models.assignment import Assignment
from models.unit import Unit
from models.student import Student
from models.class_data import ClassData

__all__ = [
    "Assignment",
    "Unit",
    "Student",
    "ClassData",
]
