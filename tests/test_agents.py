"""Tests for the three stage agents against a scripted provider."""

import json

import pytest

from gaswiz.agents.code_generator.agent import CodeGeneratorAgent
from gaswiz.agents.designer.agent import DesignerAgent
from gaswiz.agents.idea_expander.agent import IdeaExpanderAgent
from gaswiz.core.shape import MissingStructureError
from gaswiz.llm.client import ClientNotInitializedError, WizardClient
from gaswiz.prompting.prompt_builder import LINE_BREAK
from gaswiz.utils.json_repair import JsonExtractionError


def test_system_prompts_are_loaded(client):
    for agent_cls in (IdeaExpanderAgent, DesignerAgent, CodeGeneratorAgent):
        assert agent_cls(client).system_prompt.strip()


class TestIdeaExpander:
    def test_free_text_request(self, client, fake_provider):
        fake_provider.responses = ["  A recipe journal where users rate dishes.\n"]

        description = IdeaExpanderAgent(client).run("Recipe Box")

        assert description == "A recipe journal where users rate dishes."
        call = fake_provider.calls[0]
        assert call["content"] == "Project idea: Recipe Box"
        assert call["response_format"] == "text"


class TestDesigner:
    def test_recipe_box_scenario(self, client, fake_provider):
        fake_provider.responses = [
            '```json\n{"sheet_name":"Recipes","sheet_fields":["Name","Rating"],'
            '"ui_elements":["input: Name","input: Rating"]}\n```'
        ]

        proposal = DesignerAgent(client).run("Recipe Box", "Users log recipes and rate them")

        call = fake_provider.calls[0]
        assert "Recipe Box" in call["content"]
        assert "Users log recipes and rate them" in call["content"]
        assert LINE_BREAK in call["content"]
        assert call["response_format"] == "json"
        assert proposal.sheet_name == "Recipes"
        assert proposal.sheet_fields == ["Name", "Rating"]
        assert proposal.ui_elements == ["input: Name", "input: Rating"]

    def test_missing_ui_elements(self, client, fake_provider):
        fake_provider.responses = ['{"sheet_name":"X","sheet_fields":["a"],}']

        with pytest.raises(MissingStructureError, match="design proposal"):
            DesignerAgent(client).run("X", "y")

    def test_malformed_json(self, client, fake_provider):
        fake_provider.responses = ["Sorry, I cannot help with that."]

        with pytest.raises(JsonExtractionError, match="Sorry, I cannot help"):
            DesignerAgent(client).run("X", "y")

    def test_uninitialized_client(self):
        agent = DesignerAgent(WizardClient())
        with pytest.raises(ClientNotInitializedError):
            agent.run("X", "y")


class TestCodeGenerator:
    def test_full_generation(self, client, fake_provider, code_request):
        fake_provider.responses = [
            json.dumps({"code_gs": "function doGet() { return 1; }", "index_html": "<p>$5</p>"})
        ]

        artifacts = CodeGeneratorAgent(client).run(code_request)

        assert artifacts.code_gs == "function doGet() { return 1; }"
        assert artifacts.index_html == "<p>$5</p>"
        assert artifacts.sheet_structure_txt.startswith("Sheet Name: Recipes")
        assert "1-2." in artifacts.claude_prompt_txt
        call = fake_provider.calls[0]
        assert call["response_format"] == "json"
        assert "Final Google Sheet name: Recipes" in call["content"]

    def test_escaped_dollar_in_sources(self, client, fake_provider, code_request):
        fake_provider.responses = ['{"code_gs": "var p = \\$x;", "index_html": "<b>\\$</b>"}']

        artifacts = CodeGeneratorAgent(client).run(code_request)
        assert artifacts.code_gs == "var p = $x;"
        assert artifacts.index_html == "<b>$</b>"

    def test_prompts_only_makes_no_call(self, client, fake_provider, code_request):
        artifacts = CodeGeneratorAgent(client).run(code_request, prompts_only=True)

        assert fake_provider.calls == []
        assert artifacts.code_gs is None
        assert artifacts.index_html is None
        assert artifacts.prompts_only

    def test_prompts_only_works_without_client(self, code_request):
        artifacts = CodeGeneratorAgent(WizardClient()).run(code_request, prompts_only=True)
        assert artifacts.prompts_only

    def test_one_source_missing_fails_whole_stage(self, client, fake_provider, code_request):
        fake_provider.responses = ['{"code_gs": "function doGet() {}"}']

        with pytest.raises(MissingStructureError, match="code generation"):
            CodeGeneratorAgent(client).run(code_request)

    def test_derived_artifacts_independent_of_model_output(self, client, fake_provider, code_request):
        fake_provider.responses = [
            '{"code_gs": "a", "index_html": "b"}',
            '{"code_gs": "c", "index_html": "d"}',
        ]
        agent = CodeGeneratorAgent(client)
        first = agent.run(code_request)
        second = agent.run(code_request)

        assert first.sheet_structure_txt == second.sheet_structure_txt
        assert first.claude_prompt_txt == second.claude_prompt_txt
        assert first.code_gs != second.code_gs
