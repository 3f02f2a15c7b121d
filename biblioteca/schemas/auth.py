from marshmallow import Schema, fields, validate


class RegisterSchema(Schema):
    email = fields.Email(required=True)
    password = fields.Str(required=True, validate=validate.Length(min=6, max=128))
    name = fields.Str(required=True, validate=validate.Length(min=2, max=100))


class LoginSchema(Schema):
    """Schema for login request"""
    email = fields.Email(required=True)
    password = fields.Str(required=True)
