from .tables import Base, Reservations, UserRoles

__all__ = ["Base", "Reservations", "UserRoles"]
