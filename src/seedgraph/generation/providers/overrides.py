"""Providers whose output must pass their own format validation."""

import hashlib
import re
import phonenumbers
from seedgraph.generation.constants import EMAIL_DOMAIN, PASSWORD_HASH_ROUNDS, PHONE_REGION
from seedgraph.generation.errors import ValueGenerationError
from seedgraph.generation.randomness import RandomSource

_EMAIL_PATTERN = re.compile(r"^[a-z0-9._%+\-]+@[a-z0-9.\-]+\.[a-z]{2,}$")

# Assigned geographic area codes; exchanges are drawn at random
US_AREA_CODES = (
    "201", "202", "203", "205", "206", "207", "212", "213", "214", "215",
    "303", "312", "313", "404", "415", "512", "617", "702", "713",
)


class EmailProvider:
    """Unique-ish addresses of the form test+<token>@<domain>."""

    def __init__(self, random: RandomSource, domain: str = EMAIL_DOMAIN):
        self.random = random
        self.domain = domain

    def value(self) -> str:
        email = f"test+{self.random.token()}@{self.domain}".lower()
        if not _EMAIL_PATTERN.match(email):
            raise ValueGenerationError(f"invalid email address: {email}")
        return email


class PhoneNumberProvider:
    """E.164 phone numbers that libphonenumber accepts for the target region."""

    def __init__(self, random: RandomSource, region: str = PHONE_REGION):
        self.random = random
        self.region = region

    def _national_number(self) -> str:
        area = self.random.pick(US_AREA_CODES)
        exchange = 200 + self.random.integer(800)
        # N11 and 555 exchanges are reserved
        if exchange % 100 == 11 or exchange == 555:
            exchange += 1
        return f"{area}{exchange}{self.random.digits(4)}"

    def value(self) -> str:
        raw = "1" + self._national_number()
        try:
            number = phonenumbers.parse(raw, self.region)
        except phonenumbers.NumberParseException as e:
            raise ValueGenerationError(f"could not parse phone number {raw}: {e}") from e
        if not phonenumbers.is_valid_number_for_region(number, self.region):
            raise ValueGenerationError(f"invalid phone number {raw} for region {self.region}")
        return phonenumbers.format_number(number, phonenumbers.PhoneNumberFormat.E164)


class PasswordProvider:
    """Stored password hashes in pbkdf2_sha256$<rounds>$<salt>$<hash> form."""

    def __init__(self, random: RandomSource, rounds: int = PASSWORD_HASH_ROUNDS):
        self.random = random
        self.rounds = rounds

    def value(self) -> str:
        password = self.random.token()
        salt = self.random.token(16)
        dk = hashlib.pbkdf2_hmac("sha256", password.encode("utf-8"), bytes.fromhex(salt), self.rounds)
        return f"pbkdf2_sha256${self.rounds}${salt}${dk.hex()}"
