from __future__ import annotations

from pathlib import Path

import pytest

from batch_converter.converter import (
    ConversionRequest,
    ConversionStrategy,
    Converter,
    select_strategy,
)
from batch_converter.exceptions import (
    ConvertTypeUnknownError,
    ExtensionError,
    InFileLoadError,
    NotSupportedError,
    OutFileOpenError,
    OutFileWriteError,
    UnknownConverterError,
)
from batch_converter.naming import split_template
from batch_converter.types import OptionKey, TransformOptions, UnitType

from conftest import FakePart


@pytest.mark.parametrize(
    "flags, expected",
    [
        ((True, True, True, True), ConversionStrategy.PER_PART),
        ((False, True, True, True), ConversionStrategy.BY_EXTENSION),
        ((False, False, True, True), ConversionStrategy.NATIVE_SAVE),
        ((False, False, False, True), ConversionStrategy.PAGE_BY_PAGE),
        ((False, False, False, False), ConversionStrategy.WHOLE),
        ((True, False, False, False), ConversionStrategy.PER_PART),
    ],
)
def test_strategy_precedence(flags, expected) -> None:
    assert select_strategy(ConversionRequest(*flags)) is expected


def test_unknown_output_kind_does_not_load(harness, tmp_path: Path) -> None:
    harness.loader.add("in.doc")

    with pytest.raises(ConvertTypeUnknownError):
        harness.converter.convert_file("in.doc", tmp_path / "out.xyz")

    assert harness.loader.loads == []


def test_load_failure_is_reported_uniformly(harness, tmp_path: Path) -> None:
    with pytest.raises(InFileLoadError) as excinfo:
        harness.converter.convert_file("missing.doc", tmp_path / "out.pdf")

    assert isinstance(excinfo.value.__cause__, OSError)
    assert harness.writer.calls == []


def test_loader_receives_style_and_force(harness, tmp_path: Path) -> None:
    harness.loader.add("in.doc")

    harness.converter.convert_file("in.doc", tmp_path / "out.pdf", style_path="style.json", force=True)

    assert harness.loader.loads == [("in.doc", "style.json", True)]


def test_whole_document_conversion(harness, tmp_path: Path) -> None:
    document = harness.loader.add("in.doc", page_count=3)
    destination = tmp_path / "out.pdf"

    harness.converter.convert_file("in.doc", destination)

    assert len(harness.writer.calls) == 1
    call = harness.writer.calls[0]
    assert call["document"] is document
    assert call["options"] == {}
    assert call["meta"] == {"file_path": str(destination)}
    assert call["current"] is document
    assert destination.exists()


def test_page_by_page_conversion(harness, tmp_path: Path) -> None:
    harness.loader.add("in.doc", page_count=3)
    destination = tmp_path / "img" / "score.png"

    harness.converter.convert_file("in.doc", destination)

    paths = [call["path"] for call in harness.writer.calls]
    assert paths == [tmp_path / "img" / f"score-{page}.png" for page in (1, 2, 3)]
    assert [call["options"] for call in harness.writer.calls] == [
        {OptionKey.PAGE_NUMBER: index} for index in range(3)
    ]
    assert harness.writer.calls[1]["meta"] == {
        "dir_path": str(destination),
        "file_path": str(tmp_path / "img" / "score-2.png"),
    }


def test_page_by_page_stops_at_first_failure(harness, tmp_path: Path) -> None:
    harness.loader.add("in.doc", page_count=3)
    harness.writer.fail_on.add("score-2.png")

    with pytest.raises(OutFileWriteError):
        harness.converter.convert_file("in.doc", tmp_path / "score.png")

    assert len(harness.writer.calls) == 2
    assert not (tmp_path / "score-3.png").exists()


def test_native_kind_is_saved_by_document(harness, tmp_path: Path) -> None:
    document = harness.loader.add("in.doc")
    destination = tmp_path / "copy.fdoc"

    harness.converter.convert_file("in.doc", destination)

    assert document.saved == [destination]
    assert harness.writer.calls == []


def test_extension_runs_before_single_write(harness, tmp_path: Path) -> None:
    document = harness.loader.add("in.doc", page_count=4)

    # extensions take precedence over native saves and page splitting
    harness.converter.convert_file("in.doc", tmp_path / "out.png", extension="pkg.mod:fix?level=2")

    assert harness.extensions.performed == [(document, "pkg.mod:fix?level=2")]
    assert [call["path"] for call in harness.writer.calls] == [tmp_path / "out.png"]
    assert document.saved == []


def test_extension_failure_aborts_job(harness, tmp_path: Path) -> None:
    harness.loader.add("in.doc")
    harness.extensions.error = ExtensionError("boom")

    with pytest.raises(ExtensionError):
        harness.converter.convert_file("in.doc", tmp_path / "out.pdf", extension="broken")

    assert harness.writer.calls == []
    assert harness.context.current is None


def test_parts_are_written_per_part(harness, tmp_path: Path) -> None:
    violin, cello = FakePart("Violin"), FakePart("Cello")
    harness.loader.add("in.doc", part_list=[violin, cello])
    output = split_template(f"{tmp_path}/parts/", "pdf")

    harness.converter.convert_file("in.doc", output, extension="ignored")

    assert harness.extensions.performed == []
    assert [call["document"] for call in harness.writer.calls] == [violin, cello]
    assert [call["path"] for call in harness.writer.calls] == [
        tmp_path / "parts" / "Violin.pdf",
        tmp_path / "parts" / "Cello.pdf",
    ]
    assert all(call["options"] == {OptionKey.UNIT_TYPE: UnitType.PER_PART} for call in harness.writer.calls)


def test_png_parts_are_written_page_by_page(harness, tmp_path: Path) -> None:
    harness.loader.add("in.doc", part_list=[FakePart("Violin", page_count=2), FakePart("Cello", page_count=1)])

    harness.converter.convert_file("in.doc", f"{tmp_path}/parts/*.png")

    assert [call["path"].name for call in harness.writer.calls] == [
        "Violin-1.png",
        "Violin-2.png",
        "Cello-1.png",
    ]


def test_part_write_failure_stops_remaining_parts(harness, tmp_path: Path) -> None:
    harness.loader.add("in.doc", part_list=[FakePart("Violin"), FakePart("Cello"), FakePart("Viola")])
    harness.writer.fail_on.add("Cello.mp3")

    with pytest.raises(OutFileWriteError):
        harness.converter.convert_file("in.doc", f"{tmp_path}/*.mp3")

    assert [call["path"].name for call in harness.writer.calls] == ["Violin.mp3", "Cello.mp3"]
    assert harness.context.current is None


def test_parts_for_unsupported_kind(harness, tmp_path: Path) -> None:
    harness.loader.add("in.doc", part_list=[FakePart("Violin")])

    with pytest.raises(NotSupportedError):
        harness.converter.convert_file("in.doc", f"{tmp_path}/*.txt")


def test_output_open_failure(harness, tmp_path: Path) -> None:
    harness.loader.add("in.doc")
    blocked = tmp_path / "out.pdf"
    blocked.mkdir()

    with pytest.raises(OutFileOpenError):
        harness.converter.convert_file("in.doc", blocked)


def test_context_is_cleared_after_success(harness, tmp_path: Path) -> None:
    harness.loader.add("in.doc")

    harness.converter.convert_file("in.doc", tmp_path / "out.pdf")

    assert harness.context.current is None


def test_transform_and_sound_profile_are_applied(harness, tmp_path: Path) -> None:
    document = harness.loader.add("in.doc")
    options = TransformOptions(values={"rotate": 90})

    harness.converter.convert_file("in.doc", tmp_path / "out.pdf", sound_profile="Muse Sounds", transform=options)

    assert document.sound_profile == "Muse Sounds"
    assert document.transforms == [options]


def test_transform_error_propagates_unchanged(harness, tmp_path: Path) -> None:
    harness.loader.add("in.doc")
    harness.transformer.error = ValueError("cannot transpose")

    with pytest.raises(ValueError, match="cannot transpose"):
        harness.converter.convert_file(
            "in.doc", tmp_path / "out.pdf", transform=TransformOptions(values={"rotate": 90})
        )

    assert harness.writer.calls == []


def test_convert_file_json_parses_transform(harness, tmp_path: Path) -> None:
    document = harness.loader.add("in.doc")

    harness.converter.convert_file_json("in.doc", tmp_path / "out.pdf", '{"rotate": 270}')

    assert document.transforms == [TransformOptions(values={"rotate": 270})]


def test_convert_parts(harness, tmp_path: Path) -> None:
    harness.loader.add("in.doc", part_list=[FakePart("Violin")])

    harness.converter.convert_parts("in.doc", f"{tmp_path}/score-*.pdf")

    assert [call["path"].name for call in harness.writer.calls] == ["score-Violin.pdf"]
    assert harness.writer.calls[0]["current"] is not None


def test_convert_parts_requires_template(harness, tmp_path: Path) -> None:
    with pytest.raises(NotSupportedError):
        harness.converter.convert_parts("in.doc", tmp_path / "plain.pdf")


def test_loader_factory_failure_is_unknown_error(harness, tmp_path: Path) -> None:
    def broken_factory():
        raise RuntimeError("no backend")

    converter = Converter(broken_factory, writers=harness.writers, settings=harness.converter.settings)

    with pytest.raises(UnknownConverterError):
        converter.convert_file("in.doc", tmp_path / "out.pdf")
