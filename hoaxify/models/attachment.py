import datetime
import typing
import sqlalchemy
import sqlalchemy.orm
from hoaxify.models.base import Base, Identifier


class FileAttachment(Base):
    __tablename__ = "file_attachments"

    id: sqlalchemy.orm.Mapped[int] = sqlalchemy.orm.mapped_column(
        Identifier, primary_key=True, autoincrement=True
    )
    filename: sqlalchemy.orm.Mapped[str] = sqlalchemy.orm.mapped_column(
        sqlalchemy.String(255), nullable=False, unique=True
    )
    file_type: sqlalchemy.orm.Mapped[typing.Optional[str]] = sqlalchemy.orm.mapped_column(
        sqlalchemy.String(255)
    )
    upload_date: sqlalchemy.orm.Mapped[datetime.datetime] = sqlalchemy.orm.mapped_column(
        sqlalchemy.DateTime, nullable=False, index=True
    )
    hoax_id: sqlalchemy.orm.Mapped[typing.Optional[int]] = sqlalchemy.orm.mapped_column(
        sqlalchemy.BigInteger,
        sqlalchemy.ForeignKey("hoaxes.id", ondelete="CASCADE"),
        index=True
    )
