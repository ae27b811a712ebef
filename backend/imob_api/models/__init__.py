"""ORM models. Importing this package registers every table on Base.metadata."""

from imob_api.models.customer import Customer

__all__ = ["Customer"]
