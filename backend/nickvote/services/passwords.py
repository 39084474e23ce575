import secrets, string
ALPHABET = string.ascii_letters + string.digits

def generate_password(length: int = 10) -> str:
    return "".join(secrets.choice(ALPHABET) for _ in range(length))
