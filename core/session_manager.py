"""
Signed-in staff context for one Flet client.

One StaffSession is created per page and passed to every dashboard.
start() runs after a successful login, end() on sign-out or timeout and
releases every live resource (subscriptions, notifiers) the dashboards
registered while it was active.
"""
from datetime import datetime
import threading

from core.config import SESSION_TIMEOUT


class StaffSession:
    def __init__(self, timeout: int = SESSION_TIMEOUT):
        self.timeout = timeout
        self.user_id = None
        self.email = None
        self.full_name = None
        self.role = None
        self.last_activity = None
        self._resources = []
        self._lock = threading.Lock()

    @property
    def is_authenticated(self):
        return self.email is not None

    def start(self, user):
        """Start a new session for the authenticated user"""
        if self.is_authenticated:
            self.end()
        with self._lock:
            self.user_id = user.id
            self.email = user.email
            self.full_name = user.full_name
            self.role = user.role
            self.last_activity = datetime.utcnow()
        print(f"✅ Session started for {self.email} ({self.role})")
        return self

    def touch(self):
        """Refresh the last activity timestamp"""
        with self._lock:
            if not self.is_authenticated:
                return False
            self.last_activity = datetime.utcnow()
            return True

    def remaining(self) -> float:
        with self._lock:
            if not self.is_authenticated:
                return 0
            elapsed = (datetime.utcnow() - self.last_activity).total_seconds()
            return max(0, self.timeout - elapsed)

    def is_active(self) -> bool:
        return self.is_authenticated and self.remaining() > 0

    def register(self, resource):
        """Track something with a close() method; closed on end() or release()."""
        with self._lock:
            self._resources.append(resource)
        return resource

    def release(self):
        """Close every registered resource (dashboard teardown)."""
        with self._lock:
            resources, self._resources = self._resources, []
        for resource in reversed(resources):
            try:
                resource.close()
            except Exception as ex:
                print(f"⚠️ Failed to release {resource}: {ex}")

    def end(self):
        """End the session for the user"""
        self.release()
        email = self.email
        with self._lock:
            self.user_id = None
            self.email = None
            self.full_name = None
            self.role = None
            self.last_activity = None
        if email:
            print(f"🔴 Session ended for {email}")

    def as_dict(self):
        return {"id": self.user_id, "email": self.email, "full_name": self.full_name, "role": self.role}
