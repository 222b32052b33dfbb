import sqlalchemy
import sqlalchemy.orm


class Base(sqlalchemy.orm.DeclarativeBase):
    pass


# BIGINT primary keys do not autoincrement on SQLite, which the test suite runs on.
Identifier = sqlalchemy.BigInteger().with_variant(sqlalchemy.Integer(), "sqlite")
