"""
Tests for the MaskingEngine.

Tests cover:
- Redacted projection of dataclass, plain annotated and pydantic configs
- Absent sensitive values, non-mutation and idempotence
- Unreadable attributes (omitted, logged)
- Recursion into nested configs and containers
- Cycle termination (self, transitive, container)
- Unexpected failures surfacing as MaskingError
- Flat key=value rendering
"""

import logging
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from typing import Annotated, Optional

import pytest
from pydantic import BaseModel

from masking import (
    MASK_VALUE,
    AttributeResolver,
    AttributeSource,
    FieldDoc,
    MaskingEngine,
    MaskingError,
    field_doc,
    get_masked_config,
    to_masked_string,
)
from masking.sources import DEFAULT_SOURCES


@dataclass
class SampleConfig:
    normal_field: str = field_doc(default="normalValue", help="Normal field")
    sensitive_field: Optional[str] = field_doc(
        default="secretValue", sensitive=True, help="Sensitive field"
    )
    another_normal_field: str = field_doc(default="anotherNormalValue", help="Another normal field")


@dataclass
class PortConfig:
    host: str = "localhost"
    port: Annotated[Optional[int], FieldDoc(sensitive=True)] = 5432


@dataclass
class Node:
    name: str = field_doc(default="")
    secret: Optional[str] = field_doc(default=None, sensitive=True)
    parent: Optional["Node"] = None
    children: list = field(default_factory=list)


@dataclass
class OuterConfig:
    label: str = "outer"
    inner: Optional[SampleConfig] = None
    others: dict = field(default_factory=dict)


@dataclass(frozen=True)
class Credential:
    user: str = field_doc(default="")
    password: Optional[str] = field_doc(default=None, sensitive=True)


class CredentialList(list):
    """A list subclass holding credentials."""


class PlainConfig:
    user: Annotated[str, FieldDoc(help="User name")]
    password: Annotated[Optional[str], FieldDoc(sensitive=True, help="Password")]

    def __init__(self, user, password):
        self.user = user
        self.password = password


class PartiallyInitialized:
    name: Annotated[str, FieldDoc(help="Always set")]
    token: Annotated[Optional[str], FieldDoc(sensitive=True)]

    def __init__(self, name):
        self.name = name


class PydanticConfig(BaseModel):
    url: str
    api_token: Annotated[Optional[str], FieldDoc(sensitive=True)] = None
    retries: int = 3


class Grenade:
    """A value whose type makes ExplodingSource blow up."""


class ExplodingSource(AttributeSource):
    @property
    def name(self) -> str:
        return "exploding"

    def applies_to(self, cls: type) -> bool:
        if cls is Grenade:
            raise RuntimeError("cannot inspect Grenade")
        return False

    def describe(self, cls: type):
        return []


class TestMaskedProjection:
    """Test suite for the redacted projection of a single object."""

    def test_masks_sensitive_field(self, engine):
        """Should replace the sensitive value and keep the others verbatim."""
        projection = engine.masked_projection(SampleConfig())

        assert projection == {
            "normal_field": "normalValue",
            "sensitive_field": MASK_VALUE,
            "another_normal_field": "anotherNormalValue",
        }

    def test_preserves_attribute_order(self, engine):
        """Should list attributes in declaration order."""
        projection = engine.masked_projection(SampleConfig())

        assert list(projection) == ["normal_field", "sensitive_field", "another_normal_field"]

    def test_absent_sensitive_value_is_not_masked(self, engine):
        """Should keep None for a sensitive field without a value."""
        projection = engine.masked_projection(SampleConfig(sensitive_field=None))

        assert projection["sensitive_field"] is None

    def test_mask_is_not_type_preserving(self, engine):
        """Should use the string token even for non-string values."""
        projection = engine.masked_projection(PortConfig())

        assert projection == {"host": "localhost", "port": MASK_VALUE}

    def test_empty_string_is_a_present_value(self, engine):
        """Should mask a sensitive empty string, only None counts as absent."""
        projection = engine.masked_projection(SampleConfig(sensitive_field=""))

        assert projection["sensitive_field"] == MASK_VALUE

    def test_none_instance(self, engine):
        """Should return an empty projection for None."""
        assert engine.masked_projection(None) == {}

    def test_unknown_type_has_empty_projection(self, engine):
        """Should return an empty projection for types without a shape."""
        assert engine.masked_projection(object()) == {}
        assert engine.masked_projection("just a string") == {}

    def test_original_is_not_mutated(self, engine):
        """Should leave the configuration object untouched."""
        config = SampleConfig()
        engine.masked_projection(config)

        assert config.sensitive_field == "secretValue"
        assert config.normal_field == "normalValue"

    def test_idempotent(self, engine):
        """Should produce equal projections on repeated calls."""
        config = SampleConfig()

        assert engine.masked_projection(config) == engine.masked_projection(config)

    def test_plain_annotated_class(self, engine):
        """Should mask plain classes declaring FieldDoc annotations."""
        projection = engine.masked_projection(PlainConfig("admin", "hunter2"))

        assert projection == {"user": "admin", "password": MASK_VALUE}

    def test_pydantic_model(self, engine):
        """Should mask pydantic model fields marked through Annotated."""
        config = PydanticConfig(url="https://example.com", api_token="tok-123")
        projection = engine.masked_projection(config)

        assert projection == {
            "url": "https://example.com",
            "api_token": MASK_VALUE,
            "retries": 3,
        }
        assert config.api_token == "tok-123"

    def test_unreadable_attribute_is_omitted(self, engine, caplog):
        """Should skip an attribute that cannot be read and log a warning."""
        with caplog.at_level(logging.WARNING, logger="masking.engine"):
            projection = engine.masked_projection(PartiallyInitialized("visible"))

        assert projection == {"name": "visible"}
        assert "token" not in projection
        assert "Failed to get value for field token" in caplog.text


class TestNestedMasking:
    """Test suite for recursion into nested configuration objects."""

    def test_nested_config_is_masked(self, engine):
        """Should mask configuration objects held in attributes."""
        projection = engine.masked_projection(OuterConfig(inner=SampleConfig()))

        assert projection["inner"]["sensitive_field"] == MASK_VALUE
        assert projection["inner"]["normal_field"] == "normalValue"

    def test_configs_in_containers_are_masked(self, engine):
        """Should mask configuration objects inside dicts and lists."""
        config = OuterConfig(others={"primary": SampleConfig(), "ports": [PortConfig()]})
        projection = engine.masked_projection(config)

        assert projection["others"]["primary"]["sensitive_field"] == MASK_VALUE
        assert projection["others"]["ports"] == [{"host": "localhost", "port": MASK_VALUE}]

    def test_plain_values_pass_through(self, engine):
        """Should keep non-configuration values equal to the originals."""
        config = OuterConfig(others={"retries": 3, "hosts": ("a", "b")})
        projection = engine.masked_projection(config)

        assert projection["others"] == {"retries": 3, "hosts": ("a", "b")}

    def test_same_instance_on_sibling_branches(self, engine):
        """Should mask a shared instance fully on every branch."""
        shared = Node(name="shared", secret="s3cret")
        root = Node(name="root", children=[shared, shared])

        projection = engine.masked_projection(root)

        assert projection["children"] == [
            {"name": "shared", "secret": MASK_VALUE, "parent": None, "children": []},
            {"name": "shared", "secret": MASK_VALUE, "parent": None, "children": []},
        ]


    def test_configs_in_sets_are_masked(self, engine):
        """Should mask configuration objects inside sets and frozensets."""
        config = OuterConfig(others={
            "set": {Credential("alice", "pw-alice"), Credential("bob", "pw-bob")},
            "frozen": frozenset([Credential("carol", "pw-carol")]),
        })

        projection = engine.masked_projection(config)

        assert sorted(c["user"] for c in projection["others"]["set"]) == ["alice", "bob"]
        assert projection["others"]["frozen"] == [{"user": "carol", "password": MASK_VALUE}]

    def test_set_of_frozen_configs_in_string(self, engine):
        """Should not render the generated repr of frozen configs held in a set."""
        config = OuterConfig(others={"creds": {Credential("alice", "pw-alice"), Credential("bob", "pw-bob")}})

        text = engine.to_masked_string(config)

        assert "pw-alice" not in text
        assert "pw-bob" not in text
        assert text.count("password=********") == 2

    def test_container_subclasses_are_masked(self, engine):
        """Should mask configuration objects inside list and dict subclasses."""
        config = OuterConfig(others={"creds": CredentialList([Credential("alice", "pw-alice")])})

        projection = engine.masked_projection(config)

        assert projection["others"]["creds"] == [{"user": "alice", "password": MASK_VALUE}]
        assert "pw-alice" not in engine.to_masked_string(config)


class TestCycles:
    """Test suite for cycle termination."""

    def test_self_reference(self, engine):
        """Should represent a direct self reference as an empty projection."""
        node = Node(name="loop", secret="s3cret")
        node.parent = node

        projection = engine.masked_projection(node)

        assert projection == {"name": "loop", "secret": MASK_VALUE, "parent": {}, "children": []}

    def test_transitive_reference(self, engine):
        """Should terminate on a two-node cycle."""
        a = Node(name="a")
        b = Node(name="b", parent=a)
        a.parent = b

        projection = engine.masked_projection(a)

        assert projection["parent"]["name"] == "b"
        assert projection["parent"]["parent"] == {}

    def test_cycle_through_list(self, engine):
        """Should terminate when a child points back to its parent."""
        parent = Node(name="parent")
        child = Node(name="child", parent=parent)
        parent.children.append(child)

        projection = engine.masked_projection(parent)

        assert projection["children"][0]["name"] == "child"
        assert projection["children"][0]["parent"] == {}

    def test_self_containing_list(self, engine):
        """Should terminate on a list that contains itself."""
        loop = []
        loop.append(loop)
        node = Node(name="holder", children=loop)

        projection = engine.masked_projection(node)

        assert projection["children"] == [[]]

    def test_visited_set_is_per_call(self, engine):
        """Should mask the same cyclic object identically on every call."""
        node = Node(name="loop")
        node.parent = node

        first = engine.masked_projection(node)
        second = engine.masked_projection(node)

        assert first == second
        assert first["name"] == "loop"

    def test_concurrent_calls_on_shared_object(self, engine):
        """Should give every thread the same projection of one cyclic object."""
        parent = Node(name="parent", secret="s3cret")
        child = Node(name="child", secret="child-s3cret", parent=parent)
        parent.children.append(child)
        parent.parent = parent

        expected = engine.masked_projection(parent)
        with ThreadPoolExecutor(max_workers=8) as pool:
            results = list(pool.map(lambda _: engine.masked_projection(parent), range(200)))

        assert all(result == expected for result in results)
        assert expected["parent"] == {}
        assert expected["children"][0]["parent"] == {}
        assert expected["children"][0]["secret"] == MASK_VALUE


class TestUnexpectedFailures:
    """Test suite for failures outside attribute reads."""

    def test_raises_masking_error(self):
        """Should abort the projection instead of returning a partial one."""
        engine = MaskingEngine(AttributeResolver([ExplodingSource(), *DEFAULT_SOURCES]))
        config = OuterConfig(others={"bad": Grenade()})

        with pytest.raises(MaskingError) as exc_info:
            engine.masked_projection(config)

        assert isinstance(exc_info.value.__cause__, RuntimeError)
        assert "OuterConfig" in str(exc_info.value)

    def test_engine_still_works_after_failure(self):
        """Should not leak visited state from an aborted call."""
        engine = MaskingEngine(AttributeResolver([ExplodingSource(), *DEFAULT_SOURCES]))
        config = OuterConfig(others={"bad": Grenade()})

        with pytest.raises(MaskingError):
            engine.masked_projection(config)

        config.others = {}
        assert engine.masked_projection(config) == {"label": "outer", "inner": None, "others": {}}


class TestMaskedString:
    """Test suite for the flat key=value rendering."""

    def test_to_masked_string(self, engine):
        """Should render key=value pairs with the sensitive value masked."""
        text = engine.to_masked_string(SampleConfig())

        assert "normal_field=normalValue" in text
        assert "sensitive_field=********" in text
        assert "another_normal_field=anotherNormalValue" in text
        assert "secretValue" not in text

    def test_format(self, engine):
        """Should render braces around comma separated pairs."""
        assert engine.to_masked_string(PortConfig()) == "{host=localhost, port=********}"

    def test_nested_rendering(self, engine):
        """Should render nested projections in the same format."""
        text = engine.to_masked_string(OuterConfig(inner=PortConfig()))

        assert text == "{label=outer, inner={host=localhost, port=********}, others={}}"

    def test_module_level_helpers(self):
        """Should expose the default engine through module functions."""
        assert get_masked_config(SampleConfig())["sensitive_field"] == MASK_VALUE
        assert "sensitive_field=********" in to_masked_string(SampleConfig())
