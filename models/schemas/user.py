from marshmallow import Schema, fields


# Usernames are compared byte for byte: no trimming, no case folding.

class RegisterSchema(Schema):
    username = fields.String(required=True)
    password = fields.String(required=True, load_only=True)
    confirm_password = fields.String(required=True, load_only=True, data_key="confirmPassword")


class LoginSchema(Schema):
    username = fields.String(required=True)
    password = fields.String(required=True, load_only=True)


class RefreshSchema(Schema):
    refresh_token = fields.String(required=True)


class LogoutSchema(Schema):
    refresh_token = fields.String(load_default=None, allow_none=True)


class UserOutSchema(Schema):
    id = fields.Integer()
    username = fields.String()
