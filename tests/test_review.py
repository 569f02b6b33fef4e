import pytest

from pg_ddl_core.lib.categories import Action
from pg_ddl_core.lib.errors import MigrationAborted
from pg_ddl_core.lib.objects import Migration, MigrationCommand
from pg_ddl_core.lib.review import MigrationReview, ReviewState, interactive_review


def _migration():
    return Migration(
        commands=[
            MigrationCommand("schemas", "app", "CREATE SCHEMA app;", 120, "Create schema: app"),
            MigrationCommand("tables", "app.t", "CREATE TABLE app.t ();", 420, "Create table: app.t"),
            MigrationCommand("views", "app.v", "DROP VIEW IF EXISTS app.v CASCADE;", 9410,
                             "Drop view: app.v", Action.DROP),
        ],
        creates=2,
        drops=1,
        timestamp="20260118_093000",
    )


def _answers(*responses):
    it = iter(responses)
    return lambda prompt: next(it)


class TestMigrationReview:

    def test_approve_and_skip(self):
        review = MigrationReview(_migration())
        assert review.answer("y") == ReviewState.APPROVED
        assert review.answer("n") == ReviewState.SKIPPED
        assert review.answer("yes") == ReviewState.APPROVED
        assert review.finished

        result = review.result()
        assert [c.object_name for c in result.commands] == ["app", "app.v"]
        assert result.summary == {"creates": 1, "drops": 1, "alters": 0}
        assert result.timestamp == "20260118_093000"

    def test_view_does_not_advance(self):
        review = MigrationReview(_migration())
        assert review.answer("v") == ReviewState.VIEWING
        assert review.state == ReviewState.VIEWING
        assert review.current.object_name == "app"

    def test_unknown_answer_does_not_advance(self):
        review = MigrationReview(_migration())
        review.answer("y")
        assert review.answer("maybe") == ReviewState.REVIEWING
        assert review.current.object_name == "app.t"
        assert len(review.approved) == 1

    def test_include_all(self):
        review = MigrationReview(_migration())
        review.answer("n")
        assert review.answer("a") == ReviewState.INCLUDE_ALL
        assert review.state == ReviewState.DONE
        assert len(review.result().commands) == 2

    def test_abort(self):
        review = MigrationReview(_migration())
        review.answer("y")
        assert review.answer("q") == ReviewState.ABORTED
        assert review.finished
        with pytest.raises(MigrationAborted):
            review.result()

    def test_empty_migration_is_done(self):
        review = MigrationReview(Migration())
        assert review.state == ReviewState.DONE


class TestInteractiveReview:

    def test_prompts_each_command(self):
        output = []
        result = interactive_review(_migration(), ask=_answers("v", "y", "x", "n", "y"), out=output.append)

        assert [c.object_name for c in result.commands] == ["app", "app.v"]
        assert "    CREATE SCHEMA app;" in output
        assert "  Please answer y, n, v, a or q" in output
        assert output[-1] == "Review complete: 2 included, 1 skipped"

    def test_include_all_stops_prompting(self):
        output = []
        result = interactive_review(_migration(), ask=_answers("a"), out=output.append)
        assert len(result.commands) == 3
        assert "  Including all 3 remaining changes" in output

    def test_abort_raises(self):
        with pytest.raises(MigrationAborted):
            interactive_review(_migration(), ask=_answers("y", "q"), out=lambda line: None)

    def test_nothing_to_review(self):
        migration = Migration()
        assert interactive_review(migration, ask=_answers(), out=lambda line: None) is migration


def test_prompt_defaults_to_builtin_input(monkeypatch):
    answers = iter(["y", "n", "y"])
    monkeypatch.setattr("builtins.input", lambda prompt: next(answers))
    result = interactive_review(_migration(), out=lambda line: None)
    assert [c.object_name for c in result.commands] == ["app", "app.v"]
