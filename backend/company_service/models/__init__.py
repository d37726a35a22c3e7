from .base import Base
from .company import Company
from .profile_step import CompanyProfileStep

__all__ = ["Base", "Company", "CompanyProfileStep"]
