"""Tests for type-driven mock value synthesis."""

from __future__ import annotations

from datetime import datetime, timezone

import pytest

from lexiview.analyzers.resolver import TypeResolver, find_declaration
from lexiview.analyzers.synthesizer import (
    DEFAULT_NUMBER,
    ValueSynthesizer,
    enum_members,
    number_for,
    string_for,
)
from lexiview.models import EnumMember, FunctionPlaceholder

_FIXED_NOW = datetime(2025, 1, 2, 3, 4, 5, tzinfo=timezone.utc)


def _synthesizer(project) -> ValueSynthesizer:
    return ValueSynthesizer(TypeResolver(project.loader), clock=lambda: _FIXED_NOW)


def _props(project, relative: str, content: str, interface: str = "Props"):
    project.write({relative: content})
    return _synthesizer(project).generate_props(project.parse(relative), interface)


@pytest.mark.parametrize(
    ("field", "expected"),
    [
        ("userId", "mock-id-123"),
        ("pageTitle", "Mock Title"),
        ("displayName", "Mock displayName"),
        ("description", "This is a mock description"),
        ("contactEmail", "mock@example.com"),
        ("homepageUrl", "https://example.com"),
        ("filePath", "/mock/path"),
        ("uploadDate", "2025-10-11"),
        ("startTime", "12:34"),
        ("duration", "10:24"),
        ("accentColor", "#4a90e2"),
        ("label", "Mock label"),
    ],
)
def test_string_keyword_rules(field: str, expected: str) -> None:
    assert string_for(field) == expected


def test_string_rules_are_ordered() -> None:
    # "thumbnailId" contains both "id" and "thumbnail"; the earlier rule wins.
    assert string_for("thumbnailId") == "mock-id-123"
    assert string_for("thumbnail").startswith("data:image/svg+xml;base64,")


def test_number_keyword_rules() -> None:
    assert number_for("totalCount") == 42
    assert number_for("views") == 1234
    assert number_for("price") == 99.99
    assert number_for("percentDone") == 75
    assert number_for("tabIndex") == 0
    assert number_for("width") == DEFAULT_NUMBER


def test_interface_with_string_and_number(project) -> None:
    result = _props(
        project,
        "Person.tsx",
        """
        interface Props {
          name: string;
          size: number;
          visible: boolean;
        }
        """,
    )

    assert result.props == {"name": "Mock name", "size": 123, "visible": False}
    assert result.enums == {}


def test_array_yields_two_independent_copies(project) -> None:
    result = _props(
        project,
        "Tags.tsx",
        """
        interface Props {
          tags: string[];
          rows: Array<{ label: string }>;
        }
        """,
    )

    assert result.props["tags"] == ["Mock ", "Mock "]
    rows = result.props["rows"]
    assert rows == [{"label": "Mock label"}, {"label": "Mock label"}]
    rows[0]["label"] = "changed"
    assert rows[1]["label"] == "Mock label"
    assert rows[0] is not rows[1]


def test_function_union_and_literal_types(project) -> None:
    result = _props(
        project,
        "Mixed.tsx",
        """
        interface Props {
          onSelect: (id: string) => void;
          variant: "primary" | "secondary";
          mode: number | string;
          level: 3;
          flag: true;
          maybe: null | string;
        }
        """,
    )

    on_select = result.props["onSelect"]
    assert isinstance(on_select, FunctionPlaceholder)
    assert on_select.name == "onSelect"
    on_select("a", 1)
    assert on_select.calls == [("a", 1)]
    assert result.props["variant"] == "primary"
    assert result.props["mode"] == 123
    assert result.props["level"] == 3
    assert result.props["flag"] is True
    assert result.props["maybe"] is None


def test_special_reference_names(project) -> None:
    result = _props(
        project,
        "Special.tsx",
        """
        interface Props {
          children: React.ReactNode;
          icon: ReactElement;
          createdAt: Date;
          attachment: File;
          owner: UnknownThing;
        }
        """,
    )

    assert result.props["children"] is None
    assert result.props["icon"] is None
    assert result.props["createdAt"] == _FIXED_NOW.isoformat()
    assert result.props["attachment"]["name"] == "mock.txt"
    assert result.props["owner"] == {"mockOwner": "mock-value"}


def test_enum_fields_attach_metadata(project) -> None:
    result = _props(
        project,
        "Status.tsx",
        """
        enum Priority { Low = 0, Medium, High }
        enum Status { Active = "active", Inactive }

        interface Props {
          priority: Priority;
          status: Status;
        }
        """,
    )

    assert result.props == {"priority": 0, "status": "active"}
    assert result.enums["priority"] == (
        EnumMember("Low", 0),
        EnumMember("Medium", 1),
        EnumMember("High", 2),
    )
    assert result.enums["status"] == (
        EnumMember("Active", "active"),
        EnumMember("Inactive", 0),
    )


def test_enum_counter_follows_numeric_initializers(project) -> None:
    project.write(
        {
            "codes.ts": """
            enum Code {
              A,
              B = 10,
              C,
              D = "dee",
              E,
              F = -3,
              G,
            }
            """
        }
    )
    parsed = project.parse("codes.ts")
    members = enum_members(parsed, find_declaration(parsed, "Code"))

    assert [(member.name, member.value) for member in members] == [
        ("A", 0),
        ("B", 10),
        ("C", 11),
        ("D", "dee"),
        ("E", 12),
        ("F", -3),
        ("G", -2),
    ]


def test_nested_interfaces_and_inline_records(project) -> None:
    result = _props(
        project,
        "Nested.tsx",
        """
        interface Author {
          email: string;
          age: number;
        }

        interface Props {
          author: Author;
          meta: { viewCount: number; link: string };
        }
        """,
    )

    assert result.props["author"] == {"email": "mock@example.com", "age": 25}
    assert result.props["meta"] == {"viewCount": 42, "link": "https://example.com"}


def test_imported_types_resolve_from_their_own_file(project) -> None:
    project.write(
        {
            "src/App.tsx": """
            import { Channel } from "./models/channel";

            export enum Quality { HD = "hd", SD = "sd" }

            export interface Video {
              id: string;
              views: number;
              channel: Channel;
            }
            """,
            "src/models/channel.ts": """
            export interface Channel {
              title: string;
            }
            """,
            "src/components/VideoList.tsx": """
            import type { Video, Quality } from "../App";

            interface Props {
              videos: Video[];
              quality: Quality;
              onVideoSelect: (video: Video) => void;
            }

            export default function VideoList(props: Props) {
              return <div />;
            }
            """,
        }
    )
    synthesizer = _synthesizer(project)
    result = synthesizer.generate_props(project.parse("src/components/VideoList.tsx"), "Props")

    expected_video = {"id": "mock-id-123", "views": 1234, "channel": {"title": "Mock Title"}}
    assert result.props["videos"] == [expected_video, expected_video]
    assert result.props["quality"] == "hd"
    assert [member.value for member in result.enums["quality"]] == ["hd", "sd"]
    assert result.props["onVideoSelect"] == FunctionPlaceholder("onVideoSelect")


def test_type_alias_props(project) -> None:
    result = _props(
        project,
        "Alias.tsx",
        """
        type Props = {
          title: string;
          count: number;
        };
        """,
    )

    assert result.props == {"title": "Mock Title", "count": 42}


def test_cyclic_types_terminate(project) -> None:
    result = _props(
        project,
        "Tree.tsx",
        """
        interface TreeNode {
          label: string;
          children: TreeNode[];
          parent: TreeNode;
        }

        interface Props {
          root: TreeNode;
        }
        """,
    )

    root = result.props["root"]
    assert root["label"] == "Mock label"
    assert root["parent"] is None
    assert root["children"] == [None, None]


def test_self_referencing_props_interface(project) -> None:
    result = _props(
        project,
        "Self.tsx",
        """
        interface Props {
          name: string;
          next: Props;
        }
        """,
    )

    assert result.props == {"name": "Mock name", "next": None}


def test_missing_interface_yields_empty_result(project) -> None:
    result = _props(project, "Empty.tsx", "export const x = 1;\n", interface="Nope")

    assert result.props == {}
    assert result.enums == {}


def test_type_alias_props_keep_enum_metadata(project) -> None:
    source = """
    enum Status { On = "on", Off = "off" }

    type Props = ({
      status: Status;
      label: string;
    });

    interface PanelProps {
      status: Status;
      label: string;
    }
    """
    project.write({"Switch.tsx": source})
    synthesizer = _synthesizer(project)
    parsed = project.parse("Switch.tsx")

    alias = synthesizer.generate_props(parsed, "Props")
    interface = synthesizer.generate_props(parsed, "PanelProps")

    assert alias.props == {"status": "on", "label": "Mock label"}
    assert alias.enums == interface.enums
    assert alias.enums["status"] == (EnumMember("On", "on"), EnumMember("Off", "off"))


def test_enum_numeric_forms_stay_integral(project) -> None:
    project.write({"sizes.ts": "enum Size { Big = 1e3, Bigger, Hex = 0x10, Half = 0.5 }\n"})
    parsed = project.parse("sizes.ts")

    members = enum_members(parsed, find_declaration(parsed, "Size"))

    values = [member.value for member in members]
    assert values == [1000, 1001, 16, 0.5]
    assert all(isinstance(value, int) for value in values[:3])


@pytest.mark.parametrize(
    ("annotation", "expected"),
    [
        ("JSX.Element", None),
        ("React.ReactElement", None),
        ("Blob", {"name": "mock.txt", "type": "text/plain", "size": 12, "content": "mock content"}),
        ("File", {"name": "mock.txt", "type": "text/plain", "size": 12, "content": "mock content"}),
        ("Date", _FIXED_NOW.isoformat()),
    ],
)
def test_special_names_parametrized(project, annotation: str, expected) -> None:
    result = _props(project, "Special.tsx", f"interface Props {{\n  slot: {annotation};\n}}\n")

    assert result.props == {"slot": expected}


def test_plain_typescript_files_allow_angle_bracket_casts(project) -> None:
    project.write(
        {
            "casts.ts": """
            export interface Props {
              total: number;
            }

            export const value = <number>someInput;
            """
        }
    )
    parsed = project.parse("casts.ts")

    result = _synthesizer(project).generate_props(parsed, "Props")

    assert not parsed.root.has_error
    assert result.props == {"total": 42}
