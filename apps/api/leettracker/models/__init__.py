from leettracker.models import embedded, relational

__all__ = ["embedded", "relational"]
