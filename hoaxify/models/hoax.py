import sqlalchemy
import sqlalchemy.orm
from hoaxify.models.base import Base, Identifier


class Hoax(Base):
    __tablename__ = "hoaxes"

    id: sqlalchemy.orm.Mapped[int] = sqlalchemy.orm.mapped_column(
        Identifier, primary_key=True, autoincrement=True
    )
    content: sqlalchemy.orm.Mapped[str] = sqlalchemy.orm.mapped_column(
        sqlalchemy.Text, nullable=False
    )
    # epoch milliseconds
    timestamp: sqlalchemy.orm.Mapped[int] = sqlalchemy.orm.mapped_column(
        sqlalchemy.BigInteger, nullable=False
    )
    user_id: sqlalchemy.orm.Mapped[int] = sqlalchemy.orm.mapped_column(
        sqlalchemy.BigInteger,
        sqlalchemy.ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True
    )
