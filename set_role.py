"""Assign the role claim to an existing Firebase user.

Usage: python set_role.py <uid> <patient|doctor>
"""
import sys

from app.core.auth_utils import ROLES, set_role
from app.core.firebase import init_firebase


def main(argv):
    if len(argv) != 3 or argv[2] not in ROLES:
        print(f"Usage: python set_role.py <uid> <{'|'.join(ROLES)}>")
        return 2

    init_firebase()
    uid, role = argv[1], argv[2]
    set_role(uid, role)

    print(f"Role '{role}' set for UID: {uid}")
    print("Log out and log in again (or refresh the token with getIdToken(true)) to pick it up.")
    return 0


if __name__ == "__main__":
    sys.exit(main(sys.argv))
