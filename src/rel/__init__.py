"""Side-by-side data-access demos over a small product catalogue schema.

Two programs exercise the same tables (product, spec, image, category):
the mapper program persists SQLModel table models through ORM sessions, the
builder program composes SQLAlchemy Core statements from plain records.
"""

__version__ = "0.1.0"
