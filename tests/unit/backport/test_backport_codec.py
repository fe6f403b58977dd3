"""Unit tests for the backport sentence codec."""

import pytest

from mirrorbot.backport import BackportSpec, BackportSpecError, decode, encode, parse

SENTENCE = (
    "coqbot: backport to v8.15 "
    "(request inclusion column: https://github.com/coq/coq/projects/43#column-7463451; "
    "backported column: https://github.com/coq/coq/projects/43#column-7463452; "
    "move rejected PRs to: https://github.com/coq/coq/milestone/52)"
)

SPEC = BackportSpec(
    backport_to="v8.15",
    request_inclusion_column=7463451,
    backported_column=7463452,
    rejected_milestone=52,
)


@pytest.mark.unit
class TestParse:
    """Tests for parse."""

    def test_sentence(self) -> None:
        assert parse(SENTENCE) == SPEC

    def test_sentence_inside_description(self) -> None:
        """Text around the sentence is allowed."""
        description = f"Bug fixes for 8.15.1.\n\n{SENTENCE}\n\nRelease manager: @someone"

        assert parse(description) == SPEC

    def test_other_bot_name(self) -> None:
        sentence = SENTENCE.replace("coqbot:", "mirror-bot:", 1)

        assert parse(sentence, bot_name="mirror-bot") == SPEC
        with pytest.raises(BackportSpecError):
            parse(sentence)

    def test_bot_name_is_literal(self) -> None:
        """Regex metacharacters in the bot name are not interpreted."""
        with pytest.raises(BackportSpecError):
            parse(SENTENCE, bot_name="c.qbot")

    @pytest.mark.parametrize(
        "description",
        [
            "",
            "Plain milestone without backport info",
            SENTENCE.replace("#column-7463451", "#column-abc"),
            SENTENCE.replace("milestone/52", "milestones/52"),
            SENTENCE.replace("; backported column", ", backported column"),
            SENTENCE.replace("backport to v8.15 ", "backport to  "),
            SENTENCE[:-1],
        ],
    )
    def test_malformed(self, description: str) -> None:
        with pytest.raises(BackportSpecError):
            parse(description)

    def test_error_is_value_error(self) -> None:
        assert issubclass(BackportSpecError, ValueError)


@pytest.mark.unit
class TestDecode:
    """Tests for decode."""

    def test_decode(self) -> None:
        assert decode(SENTENCE) == SPEC

    @pytest.mark.parametrize("description", [None, "", "no sentence here"])
    def test_not_in_workflow(self, description: str | None) -> None:
        assert decode(description) is None


@pytest.mark.unit
class TestEncode:
    """Tests for encode."""

    def test_encode_matches_documented_shape(self) -> None:
        assert encode(SPEC, repo="coq/coq", project_number=43) == SENTENCE

    @pytest.mark.parametrize(
        ("spec", "bot_name", "repo", "project_number"),
        [
            (BackportSpec("v8.16", 1, 2, 3), "bot", "a/b", 1),
            (BackportSpec("v8.15", 0, 0, 0), "coqbot", "coq/coq", 0),
            (BackportSpec("release/2.x", 7463451, 7463452, 52), "coqbot", "coq/coq", 43),
            (
                BackportSpec("V8.20+rc1", 2**40, 2**40 + 1, 10**12),
                "mirror-bot",
                "my-org/my.repo",
                999,
            ),
            (BackportSpec("(branch)", 5, 6, 7), "c.q*bot", "x/y", 2),
        ],
    )
    def test_encoded_sentence_decodes(
        self, spec: BackportSpec, bot_name: str, repo: str, project_number: int
    ) -> None:
        sentence = encode(spec, bot_name=bot_name, repo=repo, project_number=project_number)

        assert decode(sentence, bot_name=bot_name) == spec

    @pytest.mark.parametrize("branch", ["", "v8 15", "v8.15\n"])
    def test_invalid_branch(self, branch: str) -> None:
        with pytest.raises(BackportSpecError):
            encode(BackportSpec(branch, 1, 2, 3))

    @pytest.mark.parametrize("repo", ["coq", "", "coq/coq/extra", "/coq", "coq/", "my org/coq"])
    def test_invalid_repo(self, repo: str) -> None:
        with pytest.raises(BackportSpecError):
            encode(SPEC, repo=repo)

    @pytest.mark.parametrize(
        "spec",
        [
            BackportSpec("v8.15", -1, 2, 3),
            BackportSpec("v8.15", 1, -2, 3),
            BackportSpec("v8.15", 1, 2, -3),
        ],
    )
    def test_negative_ids(self, spec: BackportSpec) -> None:
        with pytest.raises(BackportSpecError):
            encode(spec)

    def test_negative_project_number(self) -> None:
        with pytest.raises(BackportSpecError):
            encode(SPEC, project_number=-1)
