"""Tool routes: discover and call the subtitle tools from an agent."""

import logging
from flask import Blueprint, current_app, jsonify, request

logger = logging.getLogger(__name__)

tools_bp = Blueprint('tools', __name__, url_prefix='/api/tools')


@tools_bp.route('', methods=['GET'])
@tools_bp.route('/', methods=['GET'])
def list_tools():
    """列出所有可用工具"""
    return jsonify({'tools': current_app.tool_service.list_tools()})


@tools_bp.route('/call', methods=['POST'])
def call_tool():
    """调用工具；失败以 isError 标记返回，不返回5xx"""
    payload = request.get_json(silent=True)
    if not isinstance(payload, dict):
        payload = {}
    name = payload.get('name')
    arguments = payload.get('arguments') or {}

    if not name:
        return jsonify({'error': 'name is required'}), 400
    if not isinstance(arguments, dict):
        return jsonify({'error': 'arguments must be an object'}), 400

    logger.info(f"调用工具: {name}, 参数: {arguments}")
    result = current_app.tool_service.call_tool(name, arguments)
    return jsonify(result.to_dict())
