from sqlalchemy import Column, Integer, String, Float, ForeignKey, Table
from sqlalchemy.orm import relationship
from dsmovie.db.database import Base


user_role_table = Table(
    "tb_user_role",
    Base.metadata,
    Column("user_id", Integer, ForeignKey("tb_user.id"), primary_key=True),
    Column("role_id", Integer, ForeignKey("tb_role.id"), primary_key=True),
)


class RoleORM(Base):
    __tablename__ = "tb_role"

    id = Column(Integer, primary_key=True, index=True)
    authority = Column(String, unique=True, nullable=False)


class UserORM(Base):
    __tablename__ = "tb_user"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String)
    username = Column(String, unique=True, index=True, nullable=False)
    password = Column(String, nullable=False)

    roles = relationship("RoleORM", secondary=user_role_table)
    scores = relationship("ScoreORM", back_populates="user", passive_deletes="all")


class MovieORM(Base):
    __tablename__ = "tb_movie"

    id = Column(Integer, primary_key=True, index=True)
    title = Column(String, nullable=False)
    score = Column(Float, nullable=False, default=0.0)
    count = Column(Integer, nullable=False, default=0)
    image = Column(String)

    # the database refuses to delete a movie that still has scores
    scores = relationship("ScoreORM", back_populates="movie", passive_deletes="all")


class ScoreORM(Base):
    __tablename__ = "tb_score"

    movie_id = Column(Integer, ForeignKey("tb_movie.id"), primary_key=True)
    user_id = Column(Integer, ForeignKey("tb_user.id"), primary_key=True)
    value = Column(Float, nullable=False)

    movie = relationship("MovieORM", back_populates="scores")
    user = relationship("UserORM", back_populates="scores")
