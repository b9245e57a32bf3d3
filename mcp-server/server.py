#!/usr/bin/env python3
"""MCP Server for Household Planner.

This server exposes the federal tax and Social Security claiming
calculations as MCP tools, allowing AI assistants to answer questions
about a household's plan.
"""

import os
import sys
import json
import asyncio
import logging
from typing import Any

# Add src to path for imports
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..', 'src'))

from mcp.server import Server
from mcp.server.stdio import stdio_server
from mcp.types import Tool, TextContent

from tools import MultiProgramTools

logger = logging.getLogger("household-planner")

# Create the MCP server
server = Server("household-planner")

# Global tools instance (initialized on startup)
tools: MultiProgramTools | None = None


def get_tools() -> MultiProgramTools:
    """Get or initialize the tools instance."""
    global tools
    if tools is None:
        # Default program can be set via FINANCIAL_PLANNER_PROGRAM env var
        default_program = os.environ.get('FINANCIAL_PLANNER_PROGRAM')
        base_path = os.path.join(os.path.dirname(__file__), '..')
        tools = MultiProgramTools(base_path, default_program)
    return tools


# Common program parameter schema
PROGRAM_PARAM = {
    "type": "string",
    "description": "The program name (folder in input-parameters). If not specified, uses the default program. Use list_programs to see available programs."
}

TAX_PROFILE_SCHEMA = {
    "type": "object",
    "description": "camelCase taxProfile, e.g. {\"filingStatus\": \"mfj\", \"taxYear\": 2025, \"ordinaryIncome\": 120000}"
}

BENEFIT_PROFILE_SCHEMA = {
    "type": "object",
    "description": "camelCase benefitProfile, e.g. {\"birthYear\": 1960, \"pia\": 2000, \"claimingAge\": 67, \"lifeExpectancy\": 85}"
}


def _program_only(name: str, description: str) -> Tool:
    return Tool(
        name=name,
        description=description,
        inputSchema={
            "type": "object",
            "properties": {
                "program": PROGRAM_PARAM
            },
            "required": []
        }
    )


@server.list_tools()
async def list_tools() -> list[Tool]:
    """List available planning tools."""
    return [
        Tool(
            name="list_programs",
            description="List all available planning programs with a short overview of each.",
            inputSchema={
                "type": "object",
                "properties": {},
                "required": []
            }
        ),
        Tool(
            name="reload_programs",
            description="Reload all programs from disk. Use this after adding, modifying, or removing program spec.json files to refresh the cache without restarting the server.",
            inputSchema={
                "type": "object",
                "properties": {},
                "required": []
            }
        ),
        _program_only(
            "get_program_overview",
            "Get an overview of a program: tax year and filing status, birth years, PIAs and full retirement ages."
        ),
        _program_only(
            "get_tax_summary",
            "Get the federal tax summary for the program's taxProfile: AGI, deductions, each tax component, credits, total tax, amount due or refund, marginal and effective rates."
        ),
        _program_only(
            "get_tax_brackets",
            "Get the per-bracket breakdown of ordinary and qualified dividend / long-term gain tax."
        ),
        _program_only(
            "get_claiming_scenarios",
            "Compare Social Security claiming ages 62 through 70: monthly and annual benefit, break-even age versus 62 and lifetime value. Includes the optimal age."
        ),
        _program_only(
            "get_couple_strategies",
            "Compare household claiming strategies for a couple, with the survivor benefit and lifetime household value of each, and the recommended strategy."
        ),
        Tool(
            name="get_benefit_schedule",
            description="Get the year-by-year Social Security and pension schedule, including the survivor transition after the first death.",
            inputSchema={
                "type": "object",
                "properties": {
                    "start_year": {
                        "type": "integer",
                        "description": "Optional: first calendar year to include"
                    },
                    "end_year": {
                        "type": "integer",
                        "description": "Optional: last calendar year to include"
                    },
                    "program": PROGRAM_PARAM
                },
                "required": []
            }
        ),
        _program_only(
            "get_pension_offset",
            "For each spouse with a non-covered pension, compare the spousal benefit with and without the legacy two-thirds pension offset."
        ),
        Tool(
            name="evaluate_tax",
            description="Evaluate federal tax for an ad-hoc taxProfile without creating a program. Useful for what-if questions.",
            inputSchema={
                "type": "object",
                "properties": {
                    "tax_profile": TAX_PROFILE_SCHEMA
                },
                "required": ["tax_profile"]
            }
        ),
        Tool(
            name="optimize_benefit",
            description="Run the claiming analysis for an ad-hoc benefitProfile, optionally with a spouse, without creating a program.",
            inputSchema={
                "type": "object",
                "properties": {
                    "benefit_profile": BENEFIT_PROFILE_SCHEMA,
                    "spouse_profile": BENEFIT_PROFILE_SCHEMA,
                    "exhaustive": {
                        "type": "boolean",
                        "description": "Also search all 81 claiming-age pairs for a couple"
                    }
                },
                "required": ["benefit_profile"]
            }
        ),
    ]


@server.call_tool()
async def call_tool(name: str, arguments: dict[str, Any]) -> list[TextContent]:
    """Handle tool calls."""
    try:
        fp_tools = get_tools()
        program = arguments.get("program")

        if name == "list_programs":
            result = fp_tools.list_programs()
        elif name == "reload_programs":
            result = fp_tools.reload_programs()
        elif name == "get_program_overview":
            result = fp_tools.get_program_overview(program)
        elif name == "get_tax_summary":
            result = fp_tools.get_tax_summary(program)
        elif name == "get_tax_brackets":
            result = fp_tools.get_tax_brackets(program)
        elif name == "get_claiming_scenarios":
            result = fp_tools.get_claiming_scenarios(program)
        elif name == "get_couple_strategies":
            result = fp_tools.get_couple_strategies(program)
        elif name == "get_benefit_schedule":
            result = fp_tools.get_benefit_schedule(arguments.get("start_year"), arguments.get("end_year"), program)
        elif name == "get_pension_offset":
            result = fp_tools.get_pension_offset(program)
        elif name == "evaluate_tax":
            result = fp_tools.evaluate_tax(arguments["tax_profile"])
        elif name == "optimize_benefit":
            result = fp_tools.optimize_benefit(
                arguments["benefit_profile"],
                arguments.get("spouse_profile"),
                bool(arguments.get("exhaustive", False)),
            )
        else:
            result = {"error": f"Unknown tool: {name}"}

        return [TextContent(
            type="text",
            text=json.dumps(result, indent=2, default=str)
        )]
    except Exception as e:
        logger.warning("Tool %s failed: %s", name, e)
        return [TextContent(
            type="text",
            text=json.dumps({"error": str(e)}, indent=2)
        )]


async def main():
    """Run the MCP server."""
    # stdout carries the protocol
    logging.basicConfig(stream=sys.stderr, level=logging.INFO)
    async with stdio_server() as (read_stream, write_stream):
        await server.run(read_stream, write_stream, server.create_initialization_options())


if __name__ == "__main__":
    asyncio.run(main())
