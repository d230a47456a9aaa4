"""Supabase-backed user repository."""

from dataclasses import dataclass

from supabase import Client

from crewdesk.domain.serialization import decode_stored_user, encode_stored_user
from crewdesk.domain.users import StoredUser
from crewdesk.services.users import UserRepository


@dataclass
class SupabaseUserRepository(UserRepository):
    """Supabase implementation for user persistence."""

    client: Client

    def get_by_email(self, email: str) -> StoredUser | None:
        """Return the user for an email, if present."""
        response = (
            self.client.table("users").select("*").eq("email", email).limit(1).execute()
        )
        if response.data:
            return decode_stored_user(response.data[0])
        return None

    def get_by_id(self, user_id: str) -> StoredUser | None:
        """Return the user for an id, if present."""
        response = (
            self.client.table("users").select("*").eq("id", user_id).limit(1).execute()
        )
        if response.data:
            return decode_stored_user(response.data[0])
        return None

    def create_user(self, user: StoredUser) -> StoredUser:
        """Insert a user row and return it."""
        response = self.client.table("users").insert(encode_stored_user(user)).execute()
        if not response.data:
            raise RuntimeError("Failed to create user in Supabase")
        return decode_stored_user(response.data[0])

    def update_user(self, user: StoredUser) -> StoredUser:
        """Overwrite a user row."""
        self.client.table("users").update(encode_stored_user(user)).eq(
            "id", user.profile.id
        ).execute()
        return user

    def list_users(self) -> list[StoredUser]:
        """Return every user row."""
        response = self.client.table("users").select("*").execute()
        return [decode_stored_user(row) for row in response.data or []]

    def clear(self) -> None:
        """Delete every user row."""
        self.client.table("users").delete().neq("id", "").execute()
