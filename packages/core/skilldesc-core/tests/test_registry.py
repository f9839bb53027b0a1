"""Tests for SkillRegistry."""

import pytest

from skilldesc_core import (
    DuplicateSkillError,
    PermissionRules,
    SkillDescriptor,
    SkillNotFoundError,
    SkillRegistry,
)


def _skill(
    name: str = "incident-response",
    description: str = "Handle incidents.",
) -> SkillDescriptor:
    return SkillDescriptor(name=name, description=description, body="# Instructions")


class TestRegister:
    def test_register_single(self):
        registry = SkillRegistry()
        registry.register(_skill())
        assert registry.get_skill("incident-response").description == "Handle incidents."
        assert "incident-response" in registry
        assert len(registry) == 1

    def test_register_batch(self):
        registry = SkillRegistry()
        registry.register([_skill("skill-b"), _skill("skill-a")])
        assert [s.name for s in registry.list_skills()] == ["skill-a", "skill-b"]

    def test_register_empty_batch(self):
        registry = SkillRegistry()
        registry.register([])
        assert registry.list_skills() == []

    def test_duplicate_raises(self):
        registry = SkillRegistry()
        registry.register(_skill())
        with pytest.raises(DuplicateSkillError, match="already registered"):
            registry.register(_skill())

    def test_duplicate_within_batch_raises(self):
        registry = SkillRegistry()
        with pytest.raises(DuplicateSkillError, match="within the batch"):
            registry.register([_skill("a"), _skill("a")])

    def test_batch_is_atomic(self):
        registry = SkillRegistry()
        registry.register(_skill("existing"))
        with pytest.raises(DuplicateSkillError):
            registry.register([_skill("new-one"), _skill("existing")])
        assert "new-one" not in registry

    def test_rejects_non_descriptor(self):
        registry = SkillRegistry()
        with pytest.raises(TypeError):
            registry.register("incident-response")  # type: ignore[call-overload]
        with pytest.raises(TypeError):
            registry.register([{"name": "x"}])  # type: ignore[list-item]


class TestLookup:
    def test_get_skill_not_found(self):
        with pytest.raises(SkillNotFoundError, match="nope"):
            SkillRegistry().get_skill("nope")

    def test_repr(self):
        registry = SkillRegistry()
        assert repr(registry) == "SkillRegistry(0 skills)"
        registry.register(_skill())
        assert repr(registry) == "SkillRegistry(1 skill)"


class TestMarkdownCatalog:
    def test_contains_name_and_description(self):
        registry = SkillRegistry()
        registry.register(_skill())
        catalog = registry.get_skills_catalog(format="markdown")
        assert catalog.startswith("# Available Skills")
        assert "## incident-response" in catalog
        assert "- **Description**: Handle incidents." in catalog

    def test_empty_registry(self):
        assert "No skills" in SkillRegistry().get_skills_catalog(format="markdown")


class TestXmlCatalog:
    def test_xml_structure(self):
        registry = SkillRegistry()
        registry.register(_skill())
        xml = registry.get_skills_catalog()
        assert xml.startswith("<available_skills>")
        assert xml.endswith("</available_skills>")
        assert "<name>incident-response</name>" in xml
        assert "<description>Handle incidents.</description>" in xml

    def test_escapes_special_characters(self):
        registry = SkillRegistry()
        registry.register(_skill(description="Use <tags> & more"))
        xml = registry.get_skills_catalog(format="xml")
        assert "Use &lt;tags&gt; &amp; more" in xml

    def test_empty_registry(self):
        assert SkillRegistry().get_skills_catalog(format="xml") == "<available_skills />"

    def test_sorted_by_name(self):
        registry = SkillRegistry()
        registry.register([_skill("zeta"), _skill("alpha")])
        xml = registry.get_skills_catalog(format="xml")
        assert xml.index("alpha") < xml.index("zeta")


class TestCatalogPermissions:
    def test_denied_skills_hidden(self):
        registry = SkillRegistry()
        registry.register([_skill("public-docs"), _skill("internal-docs")])
        rules = PermissionRules(rules={"internal-*": "deny"})
        for fmt in ("xml", "markdown"):
            catalog = registry.get_skills_catalog(format=fmt, permissions=rules)
            assert "public-docs" in catalog
            assert "internal-docs" not in catalog

    def test_all_denied_renders_empty(self):
        registry = SkillRegistry()
        registry.register(_skill())
        rules = PermissionRules(default="deny")
        assert registry.get_skills_catalog(permissions=rules) == "<available_skills />"

    def test_ask_skills_listed(self):
        registry = SkillRegistry()
        registry.register(_skill())
        rules = PermissionRules(default="ask")
        assert "incident-response" in registry.get_skills_catalog(permissions=rules)


class TestUnsupportedFormat:
    def test_invalid_format_raises(self):
        with pytest.raises(ValueError, match="Unsupported format"):
            SkillRegistry().get_skills_catalog(format="json")  # type: ignore[arg-type]
