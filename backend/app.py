import logging

from flask import Flask, request, jsonify
from flask_cors import CORS

import ast_nodes
import compiler
from lexer import TokenKind

log = logging.getLogger(__name__)

app = Flask(__name__)
app.config.from_mapping(
    RUN_PROGRAM=True,
    MAX_STEPS=compiler.DEFAULT_MAX_STEPS,
    MAX_SOURCE_LENGTH=100_000,
)
# e.g. QUADC_MAX_STEPS=500
app.config.from_prefixed_env("QUADC")
CORS(app)  # allow cross-origin requests


def ast_to_dict(node):
    """
    Serialize AST to dict recursively
    """
    if node is None:
        return None
    d = {"type": type(node).__name__}
    if isinstance(node, ast_nodes.Function):
        d["return_type"] = node.return_type
        d["name"] = node.name
        d["body"] = ast_to_dict(node.body)
    elif isinstance(node, ast_nodes.Block):
        d["statements"] = [ast_to_dict(s) for s in node.statements]
    elif isinstance(node, ast_nodes.Return):
        d["expr"] = ast_to_dict(node.expr)
    elif isinstance(node, ast_nodes.If):
        d["cond"] = ast_to_dict(node.cond)
        d["then_block"] = ast_to_dict(node.then_block)
        d["else_block"] = ast_to_dict(node.else_block)
    elif isinstance(node, ast_nodes.While):
        d["cond"] = ast_to_dict(node.cond)
        d["body"] = ast_to_dict(node.body)
    elif isinstance(node, ast_nodes.Assign):
        d["target"] = node.target
        d["value"] = ast_to_dict(node.value)
    elif isinstance(node, ast_nodes.Declare):
        d["ident_type"] = node.ident_type
        d["name"] = node.name
        d["init"] = ast_to_dict(node.init)
    elif isinstance(node, ast_nodes.BinaryOp):
        d["op"] = node.op
        d["left"] = ast_to_dict(node.left)
        d["right"] = ast_to_dict(node.right)
    elif isinstance(node, ast_nodes.IntLiteral):
        d["value"] = node.value
    elif isinstance(node, ast_nodes.Variable):
        d["name"] = node.name
    return d


def empty_response(errors):
    return {
        "tokens": [],
        "ast": {},
        "quadruples": [],
        "symbol_table": [],
        "output": None,
        "errors": errors,
    }


@app.route("/health", methods=["GET"])
def health():
    return jsonify({"status": "ok"})


@app.route("/compile", methods=["POST"])
def compile_code():
    data = request.get_json(silent=True)
    if not isinstance(data, dict) or not isinstance(data.get("code", ""), str):
        return jsonify(empty_response(["Request body must be JSON with a string 'code' field"])), 400
    code = data.get("code", "")
    if len(code) > app.config["MAX_SOURCE_LENGTH"]:
        return jsonify(empty_response(["Source exceeds MAX_SOURCE_LENGTH"])), 400
    try:
        result = compiler.compile_source(
            code,
            run=app.config["RUN_PROGRAM"],
            max_steps=app.config["MAX_STEPS"],
        )

        # Process tokens to match terminal format
        processed_tokens = [
            {"id": token.id, "content": token.content()}
            for token in result['tokens']
            if token.kind != TokenKind.EOF
        ]

        quadruples = [
            {"index": i, "op": q.op, "arg1": q.arg1, "arg2": q.arg2, "result": q.result}
            for i, q in enumerate(result['quadruples'], 1)
        ]

        symbol_table = [
            {
                "name": s.name,
                "symbol_type": s.symbol_type.value,
                "data_type": s.data_type.value,
                "scope_level": s.scope_level,
            }
            for s in result['symbol_table']
        ]

        response = {
            "tokens": processed_tokens,
            "ast": ast_to_dict(result['ast']) if result['ast'] else {},
            "quadruples": quadruples,
            "symbol_table": symbol_table,
            "output": result['output'],
            "errors": result['errors'],
        }
        return jsonify(response)
    except Exception as e:
        log.exception("compilation crashed")
        return jsonify(empty_response([f"Unexpected error: {str(e)}"])), 500


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO, format='%(levelname)s:%(name)s:%(lineno)d: %(message)s')
    app.run(debug=True)
