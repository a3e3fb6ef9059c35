import pytest
from sqlalchemy import Column, Integer, create_engine, text
from sqlalchemy.dialects import sqlite
from sqlalchemy.orm import Session, declarative_base
from sqlalchemy import types as sql_types

from urivalue import InvalidUriError, Uri
from urivalue.database import URI, InvalidUriColumnValue

Base = declarative_base()


class Link(Base):
    __tablename__ = "links"
    id = Column(Integer, primary_key=True)
    target = Column(URI, nullable=True)
    route = Column(URI(255), nullable=True)


@pytest.fixture
def engine():
    engine = create_engine("sqlite://")
    Base.metadata.create_all(engine)
    yield engine
    engine.dispose()


def test_round_trip(engine):
    with Session(engine) as session:
        session.add(Link(id=1, target=Uri("https://github.com/ginsen/uri"), route=Uri("{host}/path/{id}")))
        session.commit()

    with Session(engine) as session:
        link = session.get(Link, 1)
        assert isinstance(link.target, Uri)
        assert link.target == Uri("https://github.com/ginsen/uri")
        assert link.route.host == "{host}"


def test_stored_as_string(engine):
    with Session(engine) as session:
        session.add(Link(id=1, target=Uri("https://foo.com/a?b=c#d")))
        session.commit()

    with engine.connect() as conn:
        assert conn.execute(text("SELECT target FROM links")).scalar_one() == "https://foo.com/a?b=c#d"


def test_null_round_trip(engine):
    with Session(engine) as session:
        session.add(Link(id=1, target=None))
        session.commit()

    with Session(engine) as session:
        assert session.get(Link, 1).target is None


def test_corrupt_stored_value_raises(engine):
    with engine.begin() as conn:
        conn.execute(text("INSERT INTO links (id, target) VALUES (1, 'foo bar')"))

    with Session(engine) as session:
        with pytest.raises(InvalidUriError):
            session.get(Link, 1)


def test_python_type():
    assert URI().python_type is Uri


def test_bind_param():
    column_type = URI()
    assert column_type.process_bind_param(None, None) is None
    assert column_type.process_bind_param(Uri("https://foo.com"), None) == "https://foo.com"


def test_bind_param_rejects_strings():
    with pytest.raises(InvalidUriColumnValue):
        URI().process_bind_param("https://foo.com", None)


def test_result_value():
    column_type = URI()
    uri = Uri("https://foo.com")
    assert column_type.process_result_value(None, None) is None
    assert column_type.process_result_value("", None) is None
    assert column_type.process_result_value(uri, None) is uri
    assert column_type.process_result_value("container/path", None) == Uri("container/path")


def test_literal_param():
    assert URI().process_literal_param(Uri("https://foo.com"), None) == "https://foo.com"


def test_dialect_impl():
    dialect = sqlite.dialect()
    assert isinstance(URI().load_dialect_impl(dialect), sql_types.Text)
    impl = URI(255).load_dialect_impl(dialect)
    assert isinstance(impl, sql_types.String)
    assert impl.length == 255
