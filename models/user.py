from models.base_model import Base, BaseModel
from sqlalchemy import Boolean, Column, String

from utils.security import verify_password


class User(BaseModel, Base):
    __tablename__ = "users"
    name = Column(String(255), nullable=False)
    email = Column(String(255), nullable=False, unique=True, index=True)
    password_hash = Column(String(255), nullable=False)
    # one-time token mailed on register; cleared once the address is verified
    email_token = Column(String(128), nullable=True, unique=True, index=True)
    is_verified = Column(Boolean, nullable=False, default=False)

    def is_valid_password(self, password: str) -> bool:
        """Compare a plaintext password against the stored argon2 hash."""
        return verify_password(password, self.password_hash)

    def __repr__(self):
        return f"<User {self.email}>"
