import asyncio

import mcp.types as types

import lookup_server
from config.constants import SERVER_NAME, SERVER_VERSION
from services.retrieval.service import NOT_INITIALIZED_MESSAGE, RetrievalService

from test_sampler import make_store


def _server(images):
    return lookup_server.build_server(RetrievalService(make_store(images)))


def _list_tools(server):
    handler = server.request_handlers[types.ListToolsRequest]
    return asyncio.run(handler(types.ListToolsRequest(method="tools/list"))).root


def _call(server, name, arguments):
    handler = server.request_handlers[types.CallToolRequest]
    request = types.CallToolRequest(
        method="tools/call",
        params=types.CallToolRequestParams(name=name, arguments=arguments),
    )
    return asyncio.run(handler(request)).root


def test_initialization_options_advertise_tools():
    options = _server({"cats": ["u1"]}).create_initialization_options()
    assert options.server_name == SERVER_NAME
    assert options.server_version == SERVER_VERSION
    assert options.capabilities.tools is not None


def test_list_tools():
    result = _list_tools(_server({"cats": ["u1"]}))
    assert [tool.name for tool in result.tools] == ["get_image_link"]
    assert result.tools[0].inputSchema["required"] == ["category"]


def test_call_returns_text_links():
    result = _call(_server({"cats": ["u1"]}), "get_image_link", {"category": "cats"})
    assert result.isError is False
    assert [(item.type, item.text) for item in result.content] == [("text", "u1\n")]


def test_out_of_range_num_is_coerced_not_rejected():
    result = _call(_server({"cats": ["u1", "u2"]}), "get_image_link", {"category": "cats", "num": 0})
    assert result.isError is False
    assert len(result.content) == 1


def test_unknown_category_is_error_result():
    result = _call(_server({"cats": ["u1"]}), "get_image_link", {"category": "birds"})
    assert result.isError is True
    assert result.content[0].text == "Error: Category 'birds' not found. Available categories: cats"


def test_unknown_tool_and_uninitialized_store():
    result = _call(_server({"cats": ["u1"]}), "delete_everything", {})
    assert result.isError is True
    assert result.content[0].text == "Unknown tool: delete_everything"

    result = _call(_server({}), "get_image_link", {"category": "cats"})
    assert result.isError is True
    assert result.content[0].text == NOT_INITIALIZED_MESSAGE
