"""
Example showing an ApiBuilder application deployed as an AWS Lambda function
behind API Gateway.

Key features demonstrated:
- Static success and error configuration per route
- Dynamic overrides with ApiResponse
- Redirects from 3xx success codes
- Gateway response customisation
"""

import json

from apibuilder import ApiBuilder, ApiResponse

api = ApiBuilder(log_level="INFO")

USERS = {
    "1": {"id": "1", "name": "Alice"},
    "2": {"id": "2", "name": "Bob"},
}


@api.get("/")
def health_check(request):
    return {"status": "healthy", "stage": request.context.get("stage")}


@api.get("/users/{user_id}", error=404)
def get_user(request):
    """Unknown users take the error branch and become 404 responses."""
    user_id = request.path_params["user_id"]
    if user_id not in USERS:
        raise LookupError(f"User {user_id} not found")
    return USERS[user_id]


@api.post("/users", success={"code": 201, "headers": ["Location"]}, error=400)
def create_user(request):
    if not isinstance(request.body, dict) or "name" not in request.body:
        raise ValueError("name is required")
    user_id = str(len(USERS) + 1)
    USERS[user_id] = {"id": user_id, "name": request.body["name"]}
    return ApiResponse(USERS[user_id], {"Location": f"/users/{user_id}"})


@api.get("/greeting", success={"contentType": "text/plain", "headers": {"Cache-Control": "max-age=60"}})
def greeting(request):
    name = request.query_params.get("name", "World")
    return f"Hello, {name}!"


@api.get("/docs", success=302)
def docs(request):
    return "https://example.com/docs"


@api.get("/legacy", error={"contentType": "text/plain"})
def legacy(request):
    raise ApiResponse("<error>NOT OK</error>", {"Content-Type": "text/xml"}, 500)


api.register_gateway_response(
    "DEFAULT_4XX",
    headers={"Access-Control-Allow-Origin": "*"},
)


def lambda_handler(event, context):
    """AWS Lambda handler function."""
    return api.proxy_router(event, context)


if __name__ == "__main__":
    test_event = {
        "httpMethod": "POST",
        "path": "/users",
        "headers": {"Content-Type": "application/json"},
        "queryStringParameters": None,
        "pathParameters": None,
        "body": json.dumps({"name": "Carol"}),
        "isBase64Encoded": False,
    }

    response = lambda_handler(test_event, None)
    print(json.dumps(response, indent=2))
    print(json.dumps(api.api_config(), indent=2))
