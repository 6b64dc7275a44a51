# app/models/student.py
from sqlalchemy import Column, String, Uuid

from .base import Base


class Student(Base):
    __tablename__ = "students"

    # Plain column, not a foreign key: deleting a class leaves its students in place
    class_id = Column(Uuid(as_uuid=True), nullable=False, index=True)

    name = Column(String(100), nullable=False)
    student_id = Column(String(20), index=True)
    father_name = Column(String(100), nullable=False)
    gender = Column(String(10), nullable=False)
    email = Column(String(255), index=True)
    phone = Column(String(20))
    avatar = Column(String(500))
