"""Tests for modules/storage/templates.py."""

import pytest

from modules.storage.directories import UserDirectoryResolver
from modules.storage.templates import DefaultTemplateProvider


@pytest.fixture
def resolver(data_root):
    return UserDirectoryResolver(data_root)


@pytest.fixture
def provider(resolver):
    return DefaultTemplateProvider(resolver, "default-template")


class TestActiveTemplate:
    @pytest.mark.asyncio
    async def test_missing_template(self, provider):
        info = await provider.active_template()
        assert info.exists is False
        assert info.populated_categories == []

    @pytest.mark.asyncio
    async def test_populated_categories(self, resolver, provider, file_factory):
        template = resolver.directories_for("default-template")
        file_factory(template.categories["instruct"] / "preset.json", 10)
        file_factory(template.categories["characters"] / "Seraphina.png", 10)
        file_factory(template.categories["worlds"] / ".DS_Store", 10)
        # Chats are never template content
        file_factory(template.categories["chats"] / "chat.jsonl", 10)

        info = await provider.active_template()

        assert info.exists is True
        assert info.populated_categories == ["characters", "instruct"]


class TestBaselineDirectories:
    @pytest.mark.asyncio
    async def test_none_without_template(self, provider):
        assert await provider.baseline_directories() is None

    @pytest.mark.asyncio
    async def test_none_when_template_is_empty(self, resolver, provider):
        await resolver.ensure_exists(resolver.directories_for("default-template"))
        assert await provider.baseline_directories() is None

    @pytest.mark.asyncio
    async def test_only_populated_categories_are_set(self, resolver, provider, file_factory):
        template = resolver.directories_for("default-template")
        file_factory(template.categories["instruct"] / "preset.json", 10)

        baseline = await provider.baseline_directories()

        assert baseline.get("instruct") == template.categories["instruct"]
        assert baseline.get("context") is None
        assert baseline.get("chats") is None


class TestApplyTo:
    @pytest.mark.asyncio
    async def test_copies_populated_categories(self, resolver, provider, file_factory):
        template = resolver.directories_for("default-template")
        file_factory(template.categories["instruct"] / "preset.json", 10)
        file_factory(template.categories["instruct"] / "Thumbs.db", 10)

        target = resolver.directories_for("newbie")
        await resolver.ensure_exists(target)
        copied = await provider.apply_to(target)

        assert copied == ["instruct"]
        assert (target.categories["instruct"] / "preset.json").stat().st_size == 10
        assert not (target.categories["instruct"] / "Thumbs.db").exists()

    @pytest.mark.asyncio
    async def test_no_template_copies_nothing(self, resolver, provider):
        assert await provider.apply_to(resolver.directories_for("newbie")) == []
