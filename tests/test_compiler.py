"""Tests for shellac.compiler: args() three-pass ordering and command_name()."""

import dataclasses
from concurrent.futures import ThreadPoolExecutor

import pytest

from shellac.compiler import args, command_name
from shellac.fields import CONCAT, Pos, arg, command_marker, record


@record
class Sample:
    _command: None = command_marker("test")
    flag: str = arg("-flag")
    flag_array: tuple[str, str] | None = arg("-flag-array")
    flag_bool: bool = arg("-flag-bool")
    flag_empty_sep: str = arg("-f", sep=CONCAT)
    flag_int: int = arg("-flag-int")
    flag_int_opt: int | None = arg("-flag-int-opt")
    flag_opt: str | None = arg("-flag-opt")
    flag_sep: str = arg("-flag-sep", sep="=")
    flag_slice: list[str] | None = arg("-flag-slice")
    pos_first: str = arg(pos=Pos.FIRST)
    pos_first_int: int = arg(pos=Pos.FIRST)
    pos_first_int_opt: int | None = arg(pos=Pos.FIRST)
    pos_first_opt: str | None = arg(pos=Pos.FIRST)
    pos_last: str = arg(pos=Pos.LAST)
    pos_last_int: int = arg(pos=Pos.LAST)
    pos_last_int_opt: int | None = arg(pos=Pos.LAST)
    pos_last_opt: str | None = arg(pos=Pos.LAST)
    note: str = ""


@record
class SampleDefault:
    pass


@record
class Ordered:
    # Declared out of category order on purpose.
    last_a: str = arg("--last-a", pos=Pos.LAST)
    mid_a: str = arg("--mid-a")
    first_a: str = arg(pos=Pos.FIRST)
    last_b: str = arg(pos=Pos.LAST)
    mid_b: bool = arg("--mid-b")
    first_b: str = arg("--first-b", pos=Pos.FIRST)


@record
class Find:
    dirnames: list[str] | None = arg(pos=Pos.FIRST)
    name: str = arg("-name")
    type: str = arg("-type")


@record
class Renamed:
    _command: None = command_marker("gfind")
    name: str = arg("-name")


# ---------------------------------------------------------------------------
# args()
# ---------------------------------------------------------------------------


class TestArgs:
    def test_empty_record(self) -> None:
        assert args(Sample()) == []

    def test_record_without_fields(self) -> None:
        assert args(SampleDefault()) == []

    def test_flag(self) -> None:
        assert args(Sample(flag="hi")) == ["-flag", "hi"]

    def test_flag_array(self) -> None:
        assert args(Sample(flag_array=("hi", "hi"))) == ["-flag-array", "hi", "hi"]

    def test_flag_bool(self) -> None:
        assert args(Sample(flag_bool=True)) == ["-flag-bool"]

    def test_flag_empty_sep(self) -> None:
        assert args(Sample(flag_empty_sep="hi")) == ["-fhi"]

    def test_flag_int(self) -> None:
        assert args(Sample(flag_int=47)) == ["-flag-int", "47"]

    def test_flag_sep(self) -> None:
        assert args(Sample(flag_sep="hi")) == ["-flag-sep=hi"]

    def test_flag_slice(self) -> None:
        assert args(Sample(flag_slice=["hi", "hi"])) == ["-flag-slice", "hi", "hi"]

    def test_flag_empty_slice_keeps_flag(self) -> None:
        assert args(Sample(flag_slice=[])) == ["-flag-slice"]

    def test_flag_zero(self) -> None:
        assert args(Sample(flag="")) == []
        assert args(Sample(flag_int=0)) == []

    def test_flag_zero_optional(self) -> None:
        assert args(Sample(flag_int_opt=0)) == ["-flag-int-opt", "0"]
        assert args(Sample(flag_opt="")) == ["-flag-opt", ""]

    def test_inert_field_ignored(self) -> None:
        assert args(Sample(note="just documentation")) == []

    def test_rejects_type(self) -> None:
        with pytest.raises(TypeError):
            args(Sample)

    def test_rejects_non_record(self) -> None:
        with pytest.raises(TypeError):
            args({"flag": "hi"})

    def test_plain_dataclass(self) -> None:
        @dataclasses.dataclass
        class Plain:
            level: str = arg("--level", sep="=", default="")

        assert args(Plain(level="hi")) == ["--level=hi"]


class TestArgsPositions:
    def test_pos_first(self) -> None:
        assert args(Sample(flag="hi", pos_first="first")) == ["first", "-flag", "hi"]

    def test_pos_first_int(self) -> None:
        assert args(Sample(flag="hi", pos_first_int=47)) == ["47", "-flag", "hi"]

    def test_pos_first_zero(self) -> None:
        assert args(Sample(flag="hi", pos_first="")) == ["-flag", "hi"]
        assert args(Sample(flag="hi", pos_first_int=0)) == ["-flag", "hi"]

    def test_pos_first_zero_optional(self) -> None:
        assert args(Sample(flag="hi", pos_first_int_opt=0)) == ["0", "-flag", "hi"]
        assert args(Sample(flag="hi", pos_first_opt="")) == ["", "-flag", "hi"]

    def test_pos_last(self) -> None:
        assert args(Sample(flag="hi", pos_last="last")) == ["-flag", "hi", "last"]

    def test_pos_last_int(self) -> None:
        assert args(Sample(flag="hi", pos_last_int=47)) == ["-flag", "hi", "47"]

    def test_pos_last_zero(self) -> None:
        assert args(Sample(flag="hi", pos_last="")) == ["-flag", "hi"]
        assert args(Sample(flag="hi", pos_last_int=0)) == ["-flag", "hi"]

    def test_pos_last_zero_optional(self) -> None:
        assert args(Sample(flag="hi", pos_last_int_opt=0)) == ["-flag", "hi", "0"]
        assert args(Sample(flag="hi", pos_last_opt="")) == ["-flag", "hi", ""]

    def test_unknown_pos_is_inert(self) -> None:
        with pytest.warns(UserWarning, match="unknown pos 'wrong'"):

            @record
            class Wrong:
                flag: str = arg("-flag")
                pos_wrong: str = arg(pos="wrong")

        assert args(Wrong(flag="hi", pos_wrong="wrong")) == ["-flag", "hi"]

    def test_categories_ordered_declaration_kept(self) -> None:
        rec = Ordered(
            last_a="la", mid_a="ma", first_a="fa", last_b="lb", mid_b=True, first_b="fb"
        )
        assert args(rec) == [
            "fa",
            "--first-b",
            "fb",
            "--mid-a",
            "ma",
            "--mid-b",
            "--last-a",
            "la",
            "lb",
        ]

    def test_find_round_trip(self) -> None:
        rec = Find(dirnames=["."], name="*.go", type="f")
        assert args(rec) == [".", "-name", "*.go", "-type", "f"]

    def test_does_not_mutate_record(self) -> None:
        rec = Find(dirnames=["."], name="*.go")
        before = dataclasses.asdict(rec)
        args(rec)
        args(rec)
        assert dataclasses.asdict(rec) == before

    def test_fresh_vector_per_call(self) -> None:
        rec = Find(dirnames=["."])
        first = args(rec)
        first.append("extra")
        assert args(rec) == ["."]
        assert rec.dirnames == ["."]

    def test_concurrent_calls_on_shared_record(self) -> None:
        rec = Find(dirnames=[".", "src"], name="*.go", type="f")
        expected = args(rec)
        with ThreadPoolExecutor(max_workers=8) as pool:
            results = list(pool.map(lambda _: args(rec), range(200)))
        assert all(r == expected for r in results)
        assert rec.dirnames == [".", "src"]


# ---------------------------------------------------------------------------
# command_name()
# ---------------------------------------------------------------------------


class TestCommandName:
    def test_marker_override(self) -> None:
        assert command_name(Sample()) == "test"

    def test_default_lowercase_type_name(self) -> None:
        assert command_name(SampleDefault()) == "sampledefault"
        assert command_name(Find) == "find"

    def test_override_wins_over_type_name(self) -> None:
        assert command_name(Renamed) == "gfind"
        assert command_name(Renamed(name="x")) == "gfind"

    def test_first_override_wins(self) -> None:
        @record
        class Twice:
            _first: None = command_marker("one")
            visible: str = arg("-v", command="two")

        assert command_name(Twice) == "one"

    def test_override_on_exported_field(self) -> None:
        @record
        class Exported:
            verbose: bool = arg("-v", command="tool")

        assert command_name(Exported) == "tool"
        assert args(Exported(verbose=True)) == ["-v"]

    def test_marker_never_emitted(self) -> None:
        assert "test" not in args(Sample(flag="x"))
