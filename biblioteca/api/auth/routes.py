from flask import Blueprint, request, current_app
from flasgger import swag_from
from flask_jwt_extended import create_access_token, jwt_required
from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from ...utils.audit import audit_log
from ...utils.principal import Principal, current_principal, ROLE_ADMIN
from ...utils.rbac import roles_required
from ...extensions import db
from ...models.user import User
from ...schemas.auth import RegisterSchema, LoginSchema
from ...schemas.user import UserSchema
from ...utils.validation import validate_or_abort

auth_bp = Blueprint("auth", __name__)

register_schema = RegisterSchema()
login_req_schema = LoginSchema()
user_schema = UserSchema()
user_list_schema = UserSchema(many=True)


@auth_bp.post("/register")
@swag_from({
    "tags": ["Auth"],
    "summary": "Register a user",
    "description": "Registers a new library user. Administrators are created with `flask create-admin`.",
    "parameters": [{
        "in": "body",
        "name": "body",
        "required": True,
        "schema": {
            "type": "object",
            "properties": {
                "email": {"type": "string", "example": "lector@example.com"},
                "password": {"type": "string", "example": "secreto123"},
                "name": {"type": "string", "example": "Ana Lectora"}
            },
            "required": ["email", "password", "name"]
        }
    }],
    "responses": {
        "201": {"description": "User created"},
        "400": {"description": "Validation error"},
        "409": {"description": "Email already exists"}
    }
})
def register():
    payload = request.get_json(silent=True) or {}
    payload = validate_or_abort(register_schema, payload)

    email = payload["email"].lower().strip()

    if User.query.filter_by(email=email).first():
        return {"message": "Email already registered"}, 409

    user = User(email=email, name=payload["name"].strip(), role=User.ROLE_USER)
    user.set_password(payload["password"])

    try:
        db.session.add(user)
        db.session.flush()  # ensure user.id exists for audit

        audit_log(
            action="USER_REGISTERED",
            entity_type="AUTH",
            entity_id=user.id,
            details={"email": user.email},
            actor=Principal(id=user.id, role=user.role),
        )

        db.session.commit()
        return {"message": "User registered successfully", "user": user_schema.dump(user)}, 201

    except IntegrityError:
        # Lost a race against a concurrent registration of the same email
        db.session.rollback()
        return {"message": "Email already registered"}, 409
    except SQLAlchemyError:
        db.session.rollback()
        current_app.logger.exception("DB error during register")
        return {"message": "Failed to register user"}, 500


@auth_bp.post("/login")
@swag_from({
    "tags": ["Auth"],
    "summary": "Login with email and password",
    "description": "Returns an access token carrying the user's role.",
    "responses": {
        200: {"description": "Login successful, token returned"},
        400: {"description": "Validation error"},
        401: {"description": "Invalid credentials"},
    }
})
def login():
    payload = request.get_json(silent=True) or {}
    payload = validate_or_abort(login_req_schema, payload)

    email = payload["email"].lower().strip()

    try:
        user = User.query.filter_by(email=email).first()
    except SQLAlchemyError:
        current_app.logger.exception("DB error during login")
        return {"message": "Authentication service error. Please try again."}, 500

    # Invalid credentials (don't leak which part failed)
    if not user or not user.check_password(payload["password"]):
        return {"message": "Invalid email or password"}, 401

    access_token = create_access_token(identity=str(user.id), additional_claims={"role": user.role})

    return {
        "message": "Login successful",
        "access_token": access_token,
        "token_type": "bearer",
        "user": user_schema.dump(user),
    }, 200


@auth_bp.get("/me")
@jwt_required()
@swag_from({
    "tags": ["Auth"],
    "security": [{"BearerAuth": []}],
    "summary": "Get current user profile",
    "responses": {
        200: {"description": "User profile"},
        401: {"description": "Unauthorized"},
        404: {"description": "User not found"},
    },
})
def me():
    user = db.session.get(User, current_principal().id)
    if not user:
        return {"message": "User not found"}, 404
    return {"user": user_schema.dump(user)}, 200


@auth_bp.get("/users")
@jwt_required()
@roles_required(ROLE_ADMIN)
@swag_from({
    "tags": ["Auth"],
    "security": [{"BearerAuth": []}],
    "summary": "List users (admin only)",
    "description": "All registered users, newest first.",
    "responses": {
        200: {"description": "Users and total"},
        401: {"description": "Unauthorized"},
        403: {"description": "Forbidden"},
    },
})
def list_users():
    try:
        users = User.query.order_by(User.created_at.desc()).all()
    except SQLAlchemyError:
        current_app.logger.exception("DB error listing users")
        return {"message": "Failed to list users"}, 500
    return {"users": user_list_schema.dump(users), "total": len(users)}, 200
