from typing import Optional
from sqlalchemy import Column, String, DateTime, Enum, Integer, or_
from sqlalchemy.sql import func
from util.enum import UserRole
from core.db import CreateDBSession
from core.setup import Base
from config.setting import settings
from passlib.context import CryptContext
from error import ResourceNotFoundError

# Password hashing configuration - singleton for better performance


class PasswordHasher:
    _instance = None
    _context = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super(PasswordHasher, cls).__new__(cls)
            cls._context = CryptContext(
                schemes=["bcrypt"],
                deprecated="auto",
                bcrypt__rounds=settings.BCRYPT_ROUNDS,
            )
        return cls._instance

    def hash(self, password: str) -> str:
        return self._context.hash(password)

    def verify(self, plain_password: str, hashed_password: str) -> bool:
        return self._context.verify(plain_password, hashed_password)


pwd_hasher = PasswordHasher()


class User(Base):
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True)
    role = Column(Enum(UserRole), nullable=False, index=True)
    name = Column(String(255), nullable=False)
    email = Column(String(255), unique=True, nullable=False)
    hashed_password = Column(String, nullable=False)

    # Institutional student number, only set for students
    student_code = Column(String(64), unique=True, nullable=True)
    major = Column(String(255), nullable=True)

    # Timestamps
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(
        DateTime(timezone=True), server_default=func.now(), onupdate=func.now()
    )

    def __repr__(self):
        return f"<User {self.email}>"

    def save(self) -> "User":
        with CreateDBSession() as db:
            db.add(self)
            db.commit()
            db.refresh(self)
            return self

    def update(self, **kwargs) -> "User":
        for key, value in kwargs.items():
            setattr(self, key, value)
        return self.save()

    def delete(self) -> bool:
        with CreateDBSession() as db:
            db.query(User).filter(User.id == self.id).delete()
            db.commit()
            return True

    @staticmethod
    def add(
        role: UserRole,
        name: str,
        email: str,
        password: str,
        student_code: Optional[str] = None,
        major: Optional[str] = None,
    ) -> "User":
        new_user = User(
            role=role,
            name=name,
            email=email,
            hashed_password=pwd_hasher.hash(password),
            student_code=student_code,
            major=major,
        )
        return new_user.save()

    @staticmethod
    def get_user_by_email(email: str) -> "User":
        with CreateDBSession() as db:
            return db.query(User).filter(User.email == email).first()

    @staticmethod
    def get_user_by_id(user_id: int) -> "User":
        with CreateDBSession() as db:
            return db.query(User).filter(User.id == user_id).first()

    @staticmethod
    def get_user_by_student_code(student_code: str) -> "User":
        with CreateDBSession() as db:
            return db.query(User).filter(User.student_code == student_code).first()

    @staticmethod
    def get_users_by_ids(user_ids: list[int]) -> list["User"]:
        """Bulk load multiple users in a single query."""
        with CreateDBSession() as db:
            return db.query(User).filter(User.id.in_(user_ids)).all()

    @staticmethod
    def search(
        query: str = "", role: Optional[UserRole] = None, limit: int = 200
    ) -> list["User"]:
        with CreateDBSession() as db:
            users = db.query(User)
            if role is not None:
                users = users.filter(User.role == role)
            if query:
                like = f"%{query}%"
                users = users.filter(
                    or_(
                        User.name.ilike(like),
                        User.email.ilike(like),
                        func.coalesce(User.student_code, "").ilike(like),
                        func.coalesce(User.major, "").ilike(like),
                    )
                )
            return users.order_by(User.id.asc()).limit(limit).all()

    @staticmethod
    def verify_password(plain_password, hashed_password):
        return pwd_hasher.verify(plain_password, hashed_password)

    @staticmethod
    def validate_user_id(user_id: int) -> "User":
        user = User.get_user_by_id(user_id=user_id)
        if not user:
            raise ResourceNotFoundError(msg="User not found")
        return user
