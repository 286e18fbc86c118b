"""
Text rendering of the current page for the table and grid views.
"""

from typing import Any, Dict, List, Tuple

from .filters import parse_open_date

TABLE_COLUMNS = ("User", "Username", "Country", "Account ID", "Join Date", "Status")


def format_date(value: Any) -> str:
    """Format an openDate like 'Jan 15, 2024, 10:30 AM'; 'N/A' when missing."""
    if not value:
        return "N/A"
    parsed = parse_open_date(value)
    if parsed is None:
        return "Invalid Date"
    return parsed.strftime("%b %d, %Y, %I:%M %p")


def full_name(user: Dict[str, Any]) -> str:
    return f"{user.get('firstName') or ''} {user.get('lastName') or ''}".strip()


def user_initial(user: Dict[str, Any]) -> str:
    first_name = user.get("firstName")
    return first_name[0].upper() if first_name else "U"


def or_na(value: Any) -> str:
    return str(value) if value not in (None, "") else "N/A"


def empty_message(search_query: str) -> str:
    message = "No users found\nNo users match your search criteria"
    if search_query:
        message += f' for "{search_query}"'
    return message


def table_row(user: Dict[str, Any]) -> Tuple[str, ...]:
    return (
        f"[{user_initial(user)}] {full_name(user)}",
        f"@{or_na(user.get('username'))}",
        or_na(user.get("country")),
        or_na(user.get("accountID")),
        format_date(user.get("openDate")),
        "Active",
    )


def grid_card(user: Dict[str, Any]) -> str:
    lines = [
        f"[{user_initial(user)}] {full_name(user)}",
        f"@{or_na(user.get('username'))}",
        f"User ID:    {or_na(user.get('userID'))}",
        f"Country:    {or_na(user.get('country'))}",
        f"Account ID: {or_na(user.get('accountID'))}",
        f"Join Date:  {format_date(user.get('openDate'))}",
    ]
    return "\n".join(lines)


def detail_lines(user: Dict[str, Any]) -> List[str]:
    """Lines for the user details modal."""
    lines = [
        f"{full_name(user)}",
        f"@{or_na(user.get('username'))} - User ID: {or_na(user.get('userID'))}",
        "",
        f"User ID:        {or_na(user.get('userID'))}",
        f"Username:       {or_na(user.get('username'))}",
        f"Country:        {or_na(user.get('country'))}",
        f"Account ID:     {or_na(user.get('accountID'))}",
        f"Join Date:      {format_date(user.get('openDate'))}",
        f"User Type:      {or_na(user.get('userType'))}",
        f"Parent ID:      {or_na(user.get('parentId'))}",
        f"Email Verified: {'Yes' if user.get('emailVerified') else 'No'}",
    ]
    if user.get("currenciesPoliciesID"):
        lines.append("")
        lines.append(f"Additional Info: Currencies Policy ID: {user['currenciesPoliciesID']}")
    return lines
