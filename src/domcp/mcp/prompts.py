"""
Prompt definitions for the DOMCP MCP server.
"""

from __future__ import annotations

from mcp.types import GetPromptResult, Prompt, PromptMessage, TextContent

from domcp.core import ir

GUIDELINES_PROMPT = "domcp_guidelines"


def create_prompts() -> list[Prompt]:
    """Prompts exposed by the server."""
    return [
        Prompt(
            name=GUIDELINES_PROMPT,
            description=(
                "Architecture guidelines and mandatory tool usage for DOMCP. Use this prompt "
                "to understand how to work with the domain model and which tools to call "
                "before writing or modifying code."
            ),
            arguments=[],
        )
    ]


def get_prompt(model: ir.DomainModel, name: str) -> GetPromptResult | None:
    """Render a prompt by name, or None if it does not exist."""
    if name == GUIDELINES_PROMPT:
        return build_guidelines_prompt(model)
    return None


def build_guidelines_prompt(model: ir.DomainModel) -> GetPromptResult:
    if model.bounded_contexts:
        context_line = "Bounded contexts: " + ", ".join(bc.name for bc in model.bounded_contexts)
        bootstrap = ""
    else:
        context_line = "No bounded contexts defined yet."
        bootstrap = (
            "\n**This project has no domain model yet.** Analyze the codebase first: "
            "identify bounded contexts, entities, services, and events using the write "
            "tools, then call `save_model` to persist.\n"
        )

    rules_section = ""
    if model.rules:
        rules = "\n".join(
            f"- **{r.id}** ({r.severity.value}): {r.description}" for r in model.rules
        )
        rules_section = f"\n### Rules\n\n{rules}\n"

    text = f"""## DOMCP: {model.name}

{context_line}
{bootstrap}
### Workflow

1. **Before writing code**: call `get_architecture_overview`
2. **Before creating files**: call `suggest_file_path`
3. **Before cross-context imports**: call `validate_dependency`
4. **After model changes**: call `compare_model`, then `draft_refactoring_plan`, then `save_model`
{rules_section}"""

    return GetPromptResult(
        description=f"Architecture guidelines for {model.name}",
        messages=[PromptMessage(role="user", content=TextContent(type="text", text=text))],
    )
