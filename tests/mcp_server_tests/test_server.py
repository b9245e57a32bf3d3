"""Tests for the MCP server module."""

import os
import sys
import json
import pytest
from unittest.mock import patch, MagicMock

# Add src and mcp-server to path for imports BEFORE importing mcp modules
MCP_SERVER_PATH = os.path.abspath(os.path.join(os.path.dirname(__file__), '../../mcp-server'))
SRC_PATH = os.path.abspath(os.path.join(os.path.dirname(__file__), '../../src'))

if MCP_SERVER_PATH not in sys.path:
    sys.path.insert(0, MCP_SERVER_PATH)
if SRC_PATH not in sys.path:
    sys.path.insert(0, SRC_PATH)

from mcp.types import Tool, TextContent

# Import server module - need to import from the mcp-server directory
import importlib.util
server_spec = importlib.util.spec_from_file_location("mcp_server", os.path.join(MCP_SERVER_PATH, "server.py"))
mcp_server = importlib.util.module_from_spec(server_spec)
server_spec.loader.exec_module(mcp_server)


def _json(result):
    assert isinstance(result, list)
    assert len(result) == 1
    assert isinstance(result[0], TextContent)
    return json.loads(result[0].text)


class TestServerConfiguration:
    """Tests for server configuration and setup."""

    def test_server_name(self):
        assert mcp_server.server.name == "household-planner"

    def test_program_param_schema(self):
        assert mcp_server.PROGRAM_PARAM['type'] == 'string'
        assert 'description' in mcp_server.PROGRAM_PARAM


class TestGetTools:
    """Tests for get_tools function."""

    def setup_method(self):
        mcp_server.tools = None

    def teardown_method(self):
        mcp_server.tools = None

    def test_get_tools_initializes_on_first_call(self):
        tools = mcp_server.get_tools()
        # Check by class name since we're using dynamic imports
        assert tools.__class__.__name__ == 'MultiProgramTools'
        assert 'example' in tools.programs
        assert 'couple' in tools.programs

    def test_get_tools_returns_cached_instance(self):
        assert mcp_server.get_tools() is mcp_server.get_tools()

    @patch.dict(os.environ, {'FINANCIAL_PLANNER_PROGRAM': 'example'})
    def test_get_tools_uses_env_default_program(self):
        assert mcp_server.get_tools().default_program == 'example'


class TestListTools:
    """Tests for list_tools function."""

    @pytest.mark.asyncio
    async def test_list_tools_contains_expected_tools(self):
        tools = await mcp_server.list_tools()
        assert all(isinstance(t, Tool) for t in tools)
        assert [t.name for t in tools] == [
            'list_programs',
            'reload_programs',
            'get_program_overview',
            'get_tax_summary',
            'get_tax_brackets',
            'get_claiming_scenarios',
            'get_couple_strategies',
            'get_benefit_schedule',
            'get_pension_offset',
            'evaluate_tax',
            'optimize_benefit',
        ]

    @pytest.mark.asyncio
    async def test_tools_have_descriptions_and_schemas(self):
        for tool in await mcp_server.list_tools():
            assert tool.description
            assert tool.inputSchema['type'] == 'object'

    @pytest.mark.asyncio
    async def test_ad_hoc_tools_require_profiles(self):
        tools = {t.name: t for t in await mcp_server.list_tools()}
        assert tools['evaluate_tax'].inputSchema['required'] == ['tax_profile']
        assert tools['optimize_benefit'].inputSchema['required'] == ['benefit_profile']
        assert 'start_year' in tools['get_benefit_schedule'].inputSchema['properties']


class TestCallTool:
    """Tests for call_tool function."""

    def setup_method(self):
        mcp_server.tools = None

    @pytest.mark.asyncio
    async def test_call_list_programs(self):
        data = _json(await mcp_server.call_tool('list_programs', {}))
        assert 'example' in data['available_programs']

    @pytest.mark.asyncio
    async def test_call_get_tax_summary(self):
        data = _json(await mcp_server.call_tool('get_tax_summary', {'program': 'example'}))
        assert data['program'] == 'example'
        assert data['total_tax'] == 11424.0
        assert data['amount_due_or_refund'] == 424.0

    @pytest.mark.asyncio
    async def test_call_get_claiming_scenarios(self):
        data = _json(await mcp_server.call_tool('get_claiming_scenarios', {'program': 'example'}))
        assert len(data['scenarios']) == 9

    @pytest.mark.asyncio
    async def test_call_get_couple_strategies(self):
        data = _json(await mcp_server.call_tool('get_couple_strategies', {'program': 'couple'}))
        assert 'optimal_strategy' in data

    @pytest.mark.asyncio
    async def test_call_get_benefit_schedule_with_years(self):
        data = _json(await mcp_server.call_tool('get_benefit_schedule', {
            'program': 'couple', 'start_year': 2030, 'end_year': 2032,
        }))
        assert [r['year'] for r in data['rows']] == [2030, 2031, 2032]

    @pytest.mark.asyncio
    async def test_call_get_pension_offset(self):
        data = _json(await mcp_server.call_tool('get_pension_offset', {'program': 'couple'}))
        assert data['person2']['pension'] == 1800
        assert data['person2']['offset_reduction'] == 1200

    @pytest.mark.asyncio
    async def test_call_evaluate_tax(self):
        data = _json(await mcp_server.call_tool('evaluate_tax', {
            'tax_profile': {'filingStatus': 'single', 'taxYear': 2024, 'ordinaryIncome': 26200},
        }))
        assert data['total_tax'] == 1160.0

    @pytest.mark.asyncio
    async def test_call_optimize_benefit(self):
        data = _json(await mcp_server.call_tool('optimize_benefit', {
            'benefit_profile': {'birthYear': 1960, 'pia': 2000, 'lifeExpectancy': 85},
        }))
        assert data['optimal_age'] == 70
        assert data['fra'] == '67'
        assert data['strategies'] is None

    @pytest.mark.asyncio
    async def test_call_unknown_tool(self):
        data = _json(await mcp_server.call_tool('unknown_tool', {}))
        assert 'Unknown tool' in data['error']

    @pytest.mark.asyncio
    async def test_call_unknown_program(self):
        data = _json(await mcp_server.call_tool('get_tax_summary', {'program': 'nope'}))
        assert 'not found' in data['error']

    @pytest.mark.asyncio
    async def test_call_invalid_profile(self):
        data = _json(await mcp_server.call_tool('evaluate_tax', {
            'tax_profile': {'filingStatus': 'widowed', 'taxYear': 2025},
        }))
        assert 'error' in data

    @pytest.mark.asyncio
    async def test_call_tool_with_exception(self):
        broken = MagicMock()
        broken.list_programs.side_effect = RuntimeError("boom")
        mcp_server.tools = broken
        data = _json(await mcp_server.call_tool('list_programs', {}))
        assert data == {'error': 'boom'}


class TestResponseFormat:
    """Tests for response format consistency."""

    def setup_method(self):
        mcp_server.tools = None

    @pytest.mark.asyncio
    async def test_every_program_tool_returns_json(self):
        for tool in await mcp_server.list_tools():
            if tool.inputSchema.get('required'):
                continue
            args = {'program': 'couple'} if 'program' in tool.inputSchema['properties'] else {}
            data = _json(await mcp_server.call_tool(tool.name, args))
            assert isinstance(data, dict)
