from unittest.mock import MagicMock

from app.db.session import statement_timeout


def _session(dialect: str) -> MagicMock:
    db_session = MagicMock()
    db_session.get_bind.return_value.dialect.name = dialect
    return db_session


def test_postgres_reads_run_in_savepoint_without_timeout():
    db_session = _session("postgresql")

    with statement_timeout(db_session, None):
        pass

    db_session.begin_nested.assert_called_once()
    db_session.execute.assert_not_called()


def test_postgres_timeout_is_set_and_reset_inside_savepoint():
    db_session = _session("postgresql")

    with statement_timeout(db_session, 250):
        pass

    db_session.begin_nested.assert_called_once()
    statements = [str(call.args[0]) for call in db_session.execute.call_args_list]
    assert statements == [
        "SET LOCAL statement_timeout = 250",
        "SET LOCAL statement_timeout TO DEFAULT",
    ]


def test_other_databases_are_untouched():
    db_session = _session("sqlite")

    with statement_timeout(db_session, 250):
        pass

    db_session.begin_nested.assert_not_called()
    db_session.execute.assert_not_called()
