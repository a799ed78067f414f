from .generated import Base, Holidays, Reservations, Settings, Tables

__all__ = ["Base", "Holidays", "Reservations", "Settings", "Tables"]
