"""
Video component unit tests.

Tests for source derivation, mode selection and attribute reconciliation.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import FrozenInstanceError
from typing import Any

import pytest

from src.components.video import (
    MultipleFormats,
    SingleFormat,
    SourceDescriptor,
    TransformationDeclaration,
    VideoTagInput,
    build_sources,
    classify_formats,
    media_type_for,
    reconcile_attributes,
    resolve_video_url,
    run,
)

# --- Fake Ports ---


class RecordingUrlBuilder:
    """URL builder that records every call."""

    def __init__(self) -> None:
        self.calls: list[tuple[str | None, dict[str, Any]]] = []

    def url(self, public_id: str, options: Mapping[str, Any]) -> str:
        self.calls.append((public_id, dict(options)))
        steps = len(options.get("transformation") or [])
        return f"https://cdn.test/{options['resource_type']}/t{steps}/{public_id}.{options['format']}"


class FakeTagBuilder:
    """Tag builder returning fixed provider attributes."""

    def __init__(self, attributes: dict[str, Any] | None = None) -> None:
        self.attributes = attributes or {"poster": "https://cdn.test/poster.jpg"}
        self.calls: list[tuple[str | None, dict[str, Any]]] = []

    def video_tag_attributes(self, public_id: str, options: Mapping[str, Any]) -> dict[str, Any]:
        self.calls.append((public_id, dict(options)))
        return dict(self.attributes)


@pytest.fixture
def url_builder() -> RecordingUrlBuilder:
    return RecordingUrlBuilder()


@pytest.fixture
def tag_builder() -> FakeTagBuilder:
    return FakeTagBuilder()


# --- Media Types ---


class TestMediaType:
    """Test format token to media type mapping."""

    def test_ogv_maps_to_ogg(self) -> None:
        assert media_type_for("ogv") == "video/ogg"

    @pytest.mark.parametrize("token", ["mp4", "webm", "mov", "m3u8"])
    def test_other_tokens_map_to_themselves(self, token: str) -> None:
        assert media_type_for(token) == f"video/{token}"


# --- Format Selection ---


class TestClassifyFormats:
    """Test single vs. multiple format selection."""

    def test_string_is_single(self) -> None:
        assert classify_formats("webm", ()) == SingleFormat("webm")

    def test_list_is_multiple(self) -> None:
        assert classify_formats(["mp4", "ogv"], ()) == MultipleFormats(("mp4", "ogv"))

    def test_tuple_is_multiple(self) -> None:
        assert classify_formats(("mp4",), ()) == MultipleFormats(("mp4",))

    def test_empty_list_stays_multiple(self) -> None:
        assert classify_formats([], ("mp4",)) == MultipleFormats(())

    def test_none_uses_default(self) -> None:
        assert classify_formats(None, ("webm", "mp4")) == MultipleFormats(("webm", "mp4"))


# --- URL Resolution ---


class TestResolveVideoUrl:
    """Test per-format URL resolution."""

    def test_forces_resource_type_and_format(self, url_builder: RecordingUrlBuilder) -> None:
        resolve_video_url(
            url_builder,
            "sample",
            [],
            "mp4",
            {"mp4": {"resource_type": "image", "format": "gif", "quality": 50}},
        )

        _, options = url_builder.calls[0]
        assert options["resource_type"] == "video"
        assert options["format"] == "mp4"
        assert options["quality"] == 50

    def test_source_transformation_only_for_matching_format(
        self, url_builder: RecordingUrlBuilder
    ) -> None:
        overrides = {"webm": {"quality": "auto"}}

        resolve_video_url(url_builder, "sample", [], "mp4", overrides)
        resolve_video_url(url_builder, "sample", [], "webm", overrides)

        assert "quality" not in url_builder.calls[0][1]
        assert url_builder.calls[1][1]["quality"] == "auto"

    def test_source_chain_precedes_element_chain(
        self, url_builder: RecordingUrlBuilder
    ) -> None:
        chain = [{"width": 300}]
        resolve_video_url(
            url_builder,
            "sample",
            chain,
            "mp4",
            {"mp4": {"transformation": [{"videoCodec": "h265"}]}},
        )

        assert url_builder.calls[0][1]["transformation"] == [
            {"video_codec": "h265"},
            {"width": 300},
        ]

    def test_source_chain_kept_without_element_chain(
        self, url_builder: RecordingUrlBuilder
    ) -> None:
        resolve_video_url(
            url_builder, "sample", [], "webm", {"webm": {"transformation": "hd"}}
        )

        assert url_builder.calls[0][1]["transformation"] == [{"transformation": "hd"}]

    def test_delivery_is_lowest_layer(self, url_builder: RecordingUrlBuilder) -> None:
        resolve_video_url(
            url_builder,
            "sample",
            [],
            "mp4",
            {"mp4": {"cloud_name": "override"}},
            delivery={"cloud_name": "demo", "secure": True},
        )

        options = url_builder.calls[0][1]
        assert options["cloud_name"] == "override"
        assert options["secure"] is True

    def test_returns_builder_url_verbatim(self, url_builder: RecordingUrlBuilder) -> None:
        url = resolve_video_url(url_builder, "sample", [{"width": 1}], "webm")

        assert url == "https://cdn.test/video/t1/sample.webm"

    def test_public_id_passed_through_unvalidated(
        self, url_builder: RecordingUrlBuilder
    ) -> None:
        resolve_video_url(url_builder, "", [], "mp4")

        assert url_builder.calls[0][0] == ""


# --- Source Sets ---


class TestBuildSources:
    """Test source descriptor construction."""

    def test_one_descriptor_per_format_in_order(self, url_builder: RecordingUrlBuilder) -> None:
        sources = build_sources(url_builder, "sample", [], {}, ["mp4", "ogv"])

        assert sources == (
            SourceDescriptor("https://cdn.test/video/t0/sample.mp4", "video/mp4"),
            SourceDescriptor("https://cdn.test/video/t0/sample.ogv", "video/ogg"),
        )

    def test_duplicates_are_kept(
        self, url_builder: RecordingUrlBuilder, caplog: pytest.LogCaptureFixture
    ) -> None:
        with caplog.at_level("WARNING"):
            sources = build_sources(url_builder, "sample", [], {}, ["mp4", "mp4"])

        assert len(sources) == 2
        assert sources[0].media_type == sources[1].media_type == "video/mp4"
        assert "Duplicate video source types" in caplog.text

    def test_empty_formats_resolve_nothing(self, url_builder: RecordingUrlBuilder) -> None:
        sources = build_sources(url_builder, "sample", [], {}, [])

        assert sources == ()
        assert url_builder.calls == []


# --- Attribute Reconciliation ---


class TestReconcileAttributes:
    """Test provider/pass-through attribute merge."""

    def test_provider_keys_become_camel_case(self) -> None:
        result = reconcile_attributes({"plays_inline": True, "poster": "p.jpg"}, {})

        assert result == {"playsInline": True, "poster": "p.jpg"}

    def test_pass_through_wins(self) -> None:
        result = reconcile_attributes({"class_name": "provider"}, {"className": "caller"})

        assert result == {"className": "caller"}

    def test_values_are_not_coerced(self) -> None:
        result = reconcile_attributes({"width": 300}, {"muted": True, "data-id": 7})

        assert result["width"] == 300
        assert result["muted"] is True
        assert result["data-id"] == 7


# --- Component Entry Point ---


class TestRun:
    """Test the full derivation."""

    def test_multiple_formats_produce_sources(self, url_builder: RecordingUrlBuilder) -> None:
        inp = VideoTagInput(options={"publicId": "sample", "sourceTypes": ["mp4", "ogv"]})

        result = run(inp, url_builder=url_builder)

        assert [s.media_type for s in result.sources] == ["video/mp4", "video/ogg"]
        assert "src" not in result.tag_attributes

    def test_single_format_sets_src(self, url_builder: RecordingUrlBuilder) -> None:
        inp = VideoTagInput(options={"publicId": "sample", "sourceTypes": "webm"})

        result = run(inp, url_builder=url_builder)

        assert result.tag_attributes["src"] == "https://cdn.test/video/t0/sample.webm"
        assert result.sources == ()
        assert len(url_builder.calls) == 1

    def test_empty_list_gives_empty_sources(self, url_builder: RecordingUrlBuilder) -> None:
        inp = VideoTagInput(options={"publicId": "sample", "sourceTypes": []})

        result = run(inp, url_builder=url_builder)

        assert result.sources == ()
        assert "src" not in result.tag_attributes

    def test_default_source_types(self, url_builder: RecordingUrlBuilder) -> None:
        result = run(VideoTagInput(options={"publicId": "sample"}), url_builder=url_builder)

        assert [s.media_type for s in result.sources] == ["video/webm", "video/mp4", "video/ogg"]

    def test_custom_default_source_types(self, url_builder: RecordingUrlBuilder) -> None:
        result = run(
            VideoTagInput(options={"publicId": "sample"}),
            url_builder=url_builder,
            default_source_types=("mp4",),
        )

        assert [s.media_type for s in result.sources] == ["video/mp4"]

    def test_pass_through_attributes_win_over_provider(
        self, url_builder: RecordingUrlBuilder
    ) -> None:
        tag_builder = FakeTagBuilder({"poster": "provider.jpg", "controls_list": "x"})
        inp = VideoTagInput(
            options={"publicId": "sample", "sourceTypes": "mp4", "controlsList": "nodownload"}
        )

        result = run(inp, url_builder=url_builder, tag_builder=tag_builder)

        assert result.tag_attributes["controlsList"] == "nodownload"
        assert result.tag_attributes["poster"] == "provider.jpg"

    def test_unknown_keys_become_attributes(self, url_builder: RecordingUrlBuilder) -> None:
        inp = VideoTagInput(
            options={"publicId": "sample", "sourceTypes": [], "autoPlay": True, "data-x": "1"}
        )

        result = run(inp, url_builder=url_builder)

        assert result.tag_attributes == {"autoPlay": True, "data-x": "1"}

    def test_reserved_keys_are_not_attributes(self, url_builder: RecordingUrlBuilder) -> None:
        inp = VideoTagInput(
            options={
                "publicId": "sample",
                "sourceTypes": [],
                "fallback": "Cannot play video",
                "sourceTransformation": {},
                "innerRef": object(),
            }
        )

        result = run(inp, url_builder=url_builder)

        assert result.tag_attributes == {}
        assert result.fallback == "Cannot play video"

    def test_tag_builder_receives_snake_case_options(
        self, url_builder: RecordingUrlBuilder, tag_builder: FakeTagBuilder
    ) -> None:
        inp = VideoTagInput(
            options={
                "publicId": "sample",
                "sourceTypes": "mp4",
                "cloudName": "demo",
                "htmlWidth": 640,
                "width": 300,
            }
        )

        run(inp, url_builder=url_builder, tag_builder=tag_builder)

        public_id, options = tag_builder.calls[0]
        assert public_id == "sample"
        assert options["cloud_name"] == "demo"
        assert options["html_width"] == 640
        assert options["transformation"] == [{"width": 300}]

    def test_layer_precedence(self, url_builder: RecordingUrlBuilder) -> None:
        inp = VideoTagInput(
            context={"cloudName": "context", "title": "context", "quality": 10},
            options={"cloudName": "props", "title": "props", "publicId": "sample"},
            overrides={"title": "override", "sourceTypes": "mp4"},
        )

        result = run(inp, url_builder=url_builder)

        _, options = url_builder.calls[0]
        assert options["cloud_name"] == "props"
        assert options["transformation"] == [{"quality": 10}]
        assert result.tag_attributes["title"] == "override"

    def test_none_does_not_shadow_lower_layer(self, url_builder: RecordingUrlBuilder) -> None:
        inp = VideoTagInput(
            context={"cloudName": "demo"},
            options={"cloudName": None, "publicId": "sample", "sourceTypes": "mp4"},
        )

        run(inp, url_builder=url_builder)

        assert url_builder.calls[0][1]["cloud_name"] == "demo"

    def test_child_transformations_precede_own_params(
        self, url_builder: RecordingUrlBuilder
    ) -> None:
        inp = VideoTagInput(
            options={"publicId": "sample", "sourceTypes": "mp4", "width": 500},
            children=(TransformationDeclaration({"effect": "sepia"}),),
        )

        run(inp, url_builder=url_builder)

        assert url_builder.calls[0][1]["transformation"] == [
            {"effect": "sepia"},
            {"width": 500},
        ]

    def test_text_child_is_content(self, url_builder: RecordingUrlBuilder) -> None:
        inp = VideoTagInput(
            options={
                "publicId": "sample",
                "sourceTypes": "mp4",
                "children": "Your browser does not support video",
            }
        )

        result = run(inp, url_builder=url_builder)

        assert result.content == ("Your browser does not support video",)
        assert url_builder.calls[0][1]["transformation"] == []
        assert result.to_dict()["content"] == ["Your browser does not support video"]

    def test_mixed_children(self, url_builder: RecordingUrlBuilder) -> None:
        track = object()
        inp = VideoTagInput(
            options={
                "publicId": "sample",
                "sourceTypes": ["mp4"],
                "children": [{"effect": "sepia"}, "Fallback text", track],
            }
        )

        result = run(inp, url_builder=url_builder)

        assert url_builder.calls[0][1]["transformation"] == [{"effect": "sepia"}]
        assert result.content == ("Fallback text", track)
        assert "content" not in run(
            VideoTagInput(options={"publicId": "sample", "sourceTypes": []}),
            url_builder=url_builder,
        ).to_dict()

    def test_source_transformation_option_applies_per_format(
        self, url_builder: RecordingUrlBuilder
    ) -> None:
        inp = VideoTagInput(
            options={
                "publicId": "sample",
                "sourceTypes": ["mp4", "webm"],
                "sourceTransformation": {"webm": {"videoCodec": "vp9"}},
            }
        )

        run(inp, url_builder=url_builder)

        assert "video_codec" not in url_builder.calls[0][1]
        assert url_builder.calls[1][1]["video_codec"] == "vp9"

    def test_idempotent(self, tag_builder: FakeTagBuilder) -> None:
        inp = VideoTagInput(
            context={"cloudName": "demo"},
            options={"publicId": "sample", "sourceTypes": ["mp4", "ogv"], "width": 300},
            children=(TransformationDeclaration({"effect": "blur"}),),
        )

        first = run(inp, url_builder=RecordingUrlBuilder(), tag_builder=tag_builder)
        second = run(inp, url_builder=RecordingUrlBuilder(), tag_builder=tag_builder)

        assert first == second
        assert first.to_dict() == second.to_dict()

    def test_output_fields_cannot_be_reassigned(self, url_builder: RecordingUrlBuilder) -> None:
        result = run(
            VideoTagInput(options={"publicId": "sample", "sourceTypes": "mp4"}),
            url_builder=url_builder,
        )

        with pytest.raises(FrozenInstanceError):
            result.sources = ()  # type: ignore[misc]
        with pytest.raises(TypeError):
            hash(result)

    def test_input_layers_not_mutated(self, url_builder: RecordingUrlBuilder) -> None:
        options = {"publicId": "sample", "sourceTypes": "mp4", "width": 300}
        context = {"cloudName": "demo"}

        run(VideoTagInput(options=options, context=context), url_builder=url_builder)

        assert options == {"publicId": "sample", "sourceTypes": "mp4", "width": 300}
        assert context == {"cloudName": "demo"}

    def test_url_builder_errors_propagate(self) -> None:
        class FailingUrlBuilder:
            def url(self, public_id: str, options: Mapping[str, Any]) -> str:
                raise ValueError("Must supply public_id")

        with pytest.raises(ValueError, match="public_id"):
            run(
                VideoTagInput(options={"sourceTypes": "mp4"}),
                url_builder=FailingUrlBuilder(),
            )

    def test_to_dict_shape(self, url_builder: RecordingUrlBuilder) -> None:
        inp = VideoTagInput(options={"publicId": "sample", "sourceTypes": ["ogv"]})

        data = run(inp, url_builder=url_builder).to_dict()

        assert data == {
            "sources": [{"src": "https://cdn.test/video/t0/sample.ogv", "type": "video/ogg"}],
            "tagAttributes": {},
        }
