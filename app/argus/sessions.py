from __future__ import annotations

import secrets
from typing import Any

from flask import Flask, Request, Response
from flask.sessions import SessionInterface, SessionMixin
from itsdangerous import BadSignature, Signer
from werkzeug.datastructures import CallbackDict

from app.argus.session_store import SessionStore


class ServerSideSession(CallbackDict, SessionMixin):
    """Session dict whose payload lives in the SessionStore; only `sid` goes in the cookie."""

    def __init__(self, initial: dict[str, Any] | None = None, sid: str = "", new: bool = False) -> None:
        def on_update(self: ServerSideSession) -> None:
            self.modified = True
            self.accessed = True

        super().__init__(initial, on_update)
        self.sid = sid
        self.new = new
        self.modified = False
        self.accessed = False

    def __getitem__(self, key: str) -> Any:
        self.accessed = True
        return super().__getitem__(key)

    def get(self, key: str, default: Any = None) -> Any:
        self.accessed = True
        return super().get(key, default)


class StoreSessionInterface(SessionInterface):
    """
    Flask session interface backed by SessionStore.

    - Never persists a session that was never written to.
    - An emptied session is destroyed in the store and its cookie removed.
    - Unmodified permanent sessions are touched (expiry slides) but never recreated.
    """

    session_class = ServerSideSession
    salt = "arguspage-session"

    def __init__(self, store: SessionStore) -> None:
        self.store = store

    def _signer(self, app: Flask) -> Signer | None:
        if not app.secret_key:
            return None
        return Signer(app.secret_key, salt=self.salt)

    @staticmethod
    def generate_sid() -> str:
        return secrets.token_urlsafe(32)

    def _new_session(self) -> ServerSideSession:
        return self.session_class(sid=self.generate_sid(), new=True)

    def open_session(self, app: Flask, request: Request) -> ServerSideSession | None:
        signer = self._signer(app)
        if signer is None:
            return None
        cookie = request.cookies.get(self.get_cookie_name(app))
        if not cookie:
            return self._new_session()
        try:
            sid = signer.unsign(cookie).decode("utf-8")
        except BadSignature:
            return self._new_session()
        data = self.store.get(sid)
        if data is None:
            return self._new_session()
        return self.session_class(data, sid=sid)

    def save_session(self, app: Flask, session: ServerSideSession, response: Response) -> None:  # type: ignore[override]
        name = self.get_cookie_name(app)
        domain = self.get_cookie_domain(app)
        path = self.get_cookie_path(app)
        secure = self.get_cookie_secure(app)
        samesite = self.get_cookie_samesite(app)
        httponly = self.get_cookie_httponly(app)

        if session.accessed:
            response.vary.add("Cookie")

        if not session:
            if session.modified:
                self.store.destroy(session.sid)
                response.delete_cookie(
                    name,
                    domain=domain,
                    path=path,
                    secure=secure,
                    samesite=samesite,
                    httponly=httponly,
                )
                response.vary.add("Cookie")
            return

        if not self.should_set_cookie(app, session):
            return

        expires = self.get_expiration_time(app, session)
        if session.modified:
            self.store.set(session.sid, session, expires)
        elif not self.store.touch(session.sid, session, expires):
            # Row vanished mid-request (logout elsewhere); leave the cookie alone.
            return

        signer = self._signer(app)
        assert signer is not None
        response.set_cookie(
            name,
            signer.sign(session.sid).decode("utf-8"),
            expires=expires,
            httponly=httponly,
            domain=domain,
            path=path,
            secure=secure,
            samesite=samesite,
        )
        response.vary.add("Cookie")
