from quart import Blueprint, jsonify

from ..common.http import parse_body
from .schemas import SignInIn, SignUpIn
from .service import AuthService


def create_blueprint(service: AuthService) -> Blueprint:
    bp = Blueprint("auth", __name__, url_prefix="/auth")

    @bp.post("/signup")
    async def signup():
        payload = await parse_body(SignUpIn)
        result = await service.register(
            email=payload.email,
            password=payload.password,
            name=payload.name,
            address=payload.address,
            phone=payload.phone,
            country=payload.country,
            city=payload.city,
        )
        return jsonify({"user": result["user"].to_dict(), "token": result["token"]}), 201

    @bp.post("/signin")
    async def signin():
        payload = await parse_body(SignInIn)
        result = await service.sign_in(payload.email, payload.password)
        return jsonify({"token": result["token"], "user": result["user"].to_dict()})

    return bp
