"""Identity bounded context.

Links an external music-streaming account to an internal user, keeps the
provider tokens current and issues the session credential used by the API.
"""
