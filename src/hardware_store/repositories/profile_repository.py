from typing import Any, Dict, Optional

from sqlalchemy import DateTime

from hardware_store.repositories.base import BaseRepository

WRITABLE_COLUMNS = ("full_name", "phone", "address", "city", "country")


class ProfileRepository(BaseRepository):
    """Repository for customer profiles"""

    @property
    def table_name(self) -> str:
        return "profiles"

    def get_by_id(self, user_id: str) -> Optional[Dict[str, Any]]:
        return self.execute_single_query(
            """
            SELECT id, email, full_name, phone, address, city, country, is_admin, created_at
            FROM profiles WHERE id = :id
            """,
            {"id": user_id},
            {"created_at": DateTime(timezone=True)},
        )

    def is_admin(self, user_id: str) -> bool:
        return bool(self.execute_scalar(
            "SELECT is_admin FROM profiles WHERE id = :id", {"id": user_id}
        ))

    def email_taken(self, email: str) -> bool:
        return self.execute_scalar(
            "SELECT 1 FROM profiles WHERE email = :email", {"email": email}
        ) is not None

    def create(self, user_id: str, email: str, data: Dict[str, Any], is_admin: bool = False) -> None:
        params = {name: data.get(name) for name in WRITABLE_COLUMNS}
        params.update({"id": user_id, "email": email, "is_admin": is_admin})
        self.execute_command(
            """
            INSERT INTO profiles (id, email, full_name, phone, address, city, country, is_admin)
            VALUES (:id, :email, :full_name, :phone, :address, :city, :country, :is_admin)
            """,
            params,
        )

    def update(self, user_id: str, changes: Dict[str, Any]) -> int:
        columns = [name for name in WRITABLE_COLUMNS if name in changes]
        if not columns:
            return 1 if self.exists(user_id) else 0

        assignments = ", ".join(f"{name} = :{name}" for name in columns)
        params = {name: changes[name] for name in columns}
        params["id"] = user_id
        return self.execute_command(f"UPDATE profiles SET {assignments} WHERE id = :id", params)
