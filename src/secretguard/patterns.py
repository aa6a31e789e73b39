# Credential shape patterns
import re
from dataclasses import dataclass


@dataclass(frozen=True)
class CredentialPattern:
    """A known credential format.

    ABOUTME: env_prefix is the variable name this credential usually lives under
    """
    id: str
    name: str
    regex: re.Pattern[str]
    env_prefix: str


CREDENTIAL_PATTERNS: list[CredentialPattern] = [
    CredentialPattern("anthropic", "Anthropic API Key", re.compile(r"sk-ant-api\d{2}-[a-zA-Z0-9_-]{20,}"), "ANTHROPIC_API_KEY"),
    CredentialPattern("openai-proj", "OpenAI Project Key", re.compile(r"sk-proj-[a-zA-Z0-9]{20,}"), "OPENAI_API_KEY"),
    CredentialPattern("openai-legacy", "OpenAI Legacy Key", re.compile(r"sk-[a-zA-Z0-9]{48,}"), "OPENAI_API_KEY"),
    CredentialPattern("aws-access", "AWS Access Key", re.compile(r"AKIA[0-9A-Z]{16}"), "AWS_ACCESS_KEY_ID"),
    CredentialPattern("github-pat", "GitHub Token", re.compile(r"ghp_[a-zA-Z0-9]{36}"), "GITHUB_TOKEN"),
    CredentialPattern("github-fine", "GitHub Fine-Grained PAT", re.compile(r"github_pat_[a-zA-Z0-9]{22}_[a-zA-Z0-9]{59}"), "GITHUB_TOKEN"),
    CredentialPattern("slack", "Slack Token", re.compile(r"xox[baprs]-[0-9]{10,13}-[0-9]{10,13}-[a-zA-Z0-9]{24}"), "SLACK_TOKEN"),
    CredentialPattern("google", "Google API Key", re.compile(r"AIza[0-9A-Za-z_-]{35}"), "GOOGLE_API_KEY"),
    CredentialPattern("stripe", "Stripe Live Key", re.compile(r"sk_live_[0-9a-zA-Z]{24,}"), "STRIPE_SECRET_KEY"),
    CredentialPattern("sendgrid", "SendGrid Key", re.compile(r"SG\.[a-zA-Z0-9_-]{22}\.[a-zA-Z0-9_-]{43}"), "SENDGRID_API_KEY"),
    CredentialPattern("supabase", "Supabase Service Key", re.compile(r"eyJhbGciOiJIUzI1NiIsInR5cCI6IkpXVCJ9\.[a-zA-Z0-9_-]{50,}"), "SUPABASE_SERVICE_ROLE_KEY"),
    CredentialPattern("azure", "Azure Key", re.compile(r"[a-zA-Z0-9+/]{43}="), "AZURE_API_KEY"),
]


def matches_credential_pattern(value: str) -> bool:
    """Return True if value contains any known credential shape."""
    return any(pattern.regex.search(value) for pattern in CREDENTIAL_PATTERNS)
