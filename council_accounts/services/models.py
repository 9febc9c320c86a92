"""Database models for council accounts."""

from sqlalchemy import Column, DateTime, Enum, ForeignKey, String, Text
from sqlalchemy.orm import declarative_base, relationship

from .. import domain

Base = declarative_base()


class DBCouncil(Base):  # type: ignore
    """
    Community council (consejo comunal) to which portal users belong.

    Rows are created on demand at registration, so the descriptive fields
    may hold placeholder values.
    """

    __tablename__ = 'consejos_comunales'

    council_id = Column('id', String(32), primary_key=True)
    name = Column('nombre', Text, nullable=False, index=True)
    parish = Column('parroquia', Text, nullable=False)
    municipality = Column('municipio', Text, nullable=False)
    state = Column('estado', Text, nullable=False)
    created_at = Column(DateTime(timezone=True), nullable=False)
    updated_at = Column(DateTime(timezone=True), nullable=False)

    def to_domain(self) -> domain.Council:
        """Generate a :class:`.domain.Council` from this row."""
        return domain.Council(
            council_id=self.council_id,
            name=self.name,
            parish=self.parish,
            municipality=self.municipality,
            state=self.state
        )


class DBUser(Base):  # type: ignore
    """
    Council members who administer the portal.

    +----------------------------+-------------+------+-----+----------------+
    | Field                      | Type        | Null | Key | Default        |
    +----------------------------+-------------+------+-----+----------------+
    | id                         | varchar(32) | NO   | PRI | NULL           |
    | nombre_usuario             | varchar(255)| NO   | UNI | NULL           |
    | contrasena_hash            | varchar(255)| NO   |     | NULL           |
    | rol                        | enum        | NO   |     | NULL           |
    | consejo_comunal_id         | varchar(32) | YES  | MUL | NULL           |
    | pregunta_seguridad         | text        | NO   |     | first question |
    | respuesta_seguridad_hash   | varchar(255)| NO   |     | ''             |
    | created_at                 | datetime    | NO   |     | NULL           |
    +----------------------------+-------------+------+-----+----------------+
    """

    __tablename__ = 'usuarios'

    user_id = Column('id', String(32), primary_key=True)
    username = Column('nombre_usuario', String(255), nullable=False,
                      unique=True)
    password_hash = Column('contrasena_hash', String(255), nullable=False)
    role = Column('rol', Enum(*domain.ROLES, name='rol'), nullable=False)
    council_id = Column(
        'consejo_comunal_id',
        ForeignKey('consejos_comunales.id', ondelete='SET NULL'),
        nullable=True, index=True
    )
    security_question = Column(
        'pregunta_seguridad', Text, nullable=False,
        default=domain.DEFAULT_SECURITY_QUESTION,
        server_default=domain.DEFAULT_SECURITY_QUESTION
    )
    # Empty string means "never configured"; see domain.User.
    security_answer_hash = Column('respuesta_seguridad_hash', String(255),
                                  nullable=False, default='',
                                  server_default='')
    created_at = Column(DateTime(timezone=True), nullable=False)

    council = relationship('DBCouncil')

    def to_domain(self) -> domain.User:
        """Generate a :class:`.domain.User` from this row."""
        return domain.User(
            user_id=self.user_id,
            username=self.username,
            password_hash=self.password_hash,
            role=self.role,
            council_id=self.council_id,
            security_question=self.security_question,
            security_answer_hash=self.security_answer_hash,
            created_at=self.created_at
        )
