# storefront/data/database.py
from sqlalchemy import create_engine, event
from sqlalchemy.orm import declarative_base, sessionmaker
from sqlalchemy.pool import StaticPool

from storefront.utils.settings import DATABASE_URL


def _engine_kwargs(url: str) -> dict:
    #sqlite tylko dla testow/dev, in-memory musi dzielic jedno polaczenie
    if url.startswith("sqlite"):
        kwargs = {"connect_args": {"check_same_thread": False}}
        if url in ("sqlite://", "sqlite:///:memory:"):
            kwargs["poolclass"] = StaticPool
        return kwargs
    return {"pool_pre_ping": True}


def _enable_sqlite_transactions(engine):
    # pysqlite sam zarzadza BEGIN i psuje SAVEPOINT, przejmujemy to
    # https://docs.sqlalchemy.org/en/20/dialects/sqlite.html#serializable-isolation-savepoints-transactional-ddl
    @event.listens_for(engine, "connect")
    def _on_connect(dbapi_connection, connection_record):
        dbapi_connection.isolation_level = None
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()

    @event.listens_for(engine, "begin")
    def _on_begin(conn):
        conn.exec_driver_sql("BEGIN")


engine = create_engine(DATABASE_URL, **_engine_kwargs(DATABASE_URL))

if engine.dialect.name == "sqlite":
    _enable_sqlite_transactions(engine)

SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

Base = declarative_base()


def get_db():
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def init_db():
    # import modeli zeby zarejestrowac je w Base.metadata przed create_all
    import storefront.data.models  # noqa: F401

    Base.metadata.create_all(bind=engine)
