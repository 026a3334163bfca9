import discord

from fakes import FakeGuild, FakeMember, FakeUser
from logcord.datatypes.log_event_datatypes import (
    AuditAction,
    AuditEntry,
    BanLogEvent,
    KickLogEvent,
    LogEventKind,
    MemberLogEvent,
    RenameLogEvent,
)
from logcord.logs.renderer import RENDERERS, render_event


def _entry(action=AuditAction.MEMBER_KICK, reason=None):
    return AuditEntry(action=action, target_id=42, executor_tag="Mod#1", reason=reason)


def test_every_kind_has_a_renderer():
    assert set(RENDERERS) == set(LogEventKind)


def test_join_and_left_lines():
    guild = FakeGuild()
    member = FakeMember(42, "Victim", guild)

    assert render_event(MemberLogEvent(LogEventKind.JOIN, guild, member)) == ":inbox_tray: [JOIN] | ID: 42 | Victim"
    assert render_event(MemberLogEvent(LogEventKind.LEFT, guild, member)) == ":outbox_tray: [LEAVE] | ID: 42 | Victim"


def test_kick_line_with_reason():
    guild = FakeGuild()
    member = FakeMember(42, "Victim", guild)

    line = render_event(KickLogEvent(guild=guild, member=member, entry=_entry(reason="spam")))

    assert line == ":boot: [KICK] by Mod#1 with reason spam | ID: 42 | Victim"


def test_kick_line_without_reason():
    guild = FakeGuild()
    member = FakeMember(42, "Victim", guild)

    for reason in (None, "", "   "):
        line = render_event(KickLogEvent(guild=guild, member=member, entry=_entry(reason=reason)))
        assert line == ":boot: [KICK] by Mod#1 with no reason | ID: 42 | Victim"


def test_bare_ban_and_unban_lines_have_no_cause():
    guild = FakeGuild()
    user = FakeUser(42, "Victim")

    assert render_event(BanLogEvent(LogEventKind.BAN, guild, user)) == ":hammer: [BAN] | ID: 42 | Victim"
    assert render_event(BanLogEvent(LogEventKind.UNBAN, guild, user)) == ":peace: [UNBAN] | ID: 42 | Victim"


def test_ban_and_unban_lines_with_cause():
    guild = FakeGuild()
    user = FakeUser(42, "Victim")

    ban = BanLogEvent(LogEventKind.BAN_WITH_CAUSE, guild, user, _entry(AuditAction.MEMBER_BAN_ADD, "raiding"))
    unban = BanLogEvent(LogEventKind.UNBAN_WITH_CAUSE, guild, user, _entry(AuditAction.MEMBER_BAN_REMOVE))

    assert render_event(ban) == ":hammer: [BAN] by Mod#1 with reason raiding | ID: 42 | Victim"
    assert render_event(unban) == ":peace: [UNBAN] by Mod#1 with no reason | ID: 42 | Victim"


def test_rename_falls_back_to_username():
    guild = FakeGuild()
    before = FakeMember(42, "victim", guild, nick=None)
    after = FakeMember(42, "victim", guild, nick="Champion")

    assert render_event(RenameLogEvent(before=before, after=after)) == ":abc: [RENAME] | ID: 42 | victim → Champion"
    assert render_event(RenameLogEvent(before=after, after=before)) == ":abc: [RENAME] | ID: 42 | Champion → victim"


def test_markdown_in_names_and_reasons_is_escaped():
    guild = FakeGuild()
    member = FakeMember(42, "*bold*", guild)
    entry = AuditEntry(action=AuditAction.MEMBER_KICK, target_id=42, executor_tag="__mod__", reason="`code`")

    join_line = render_event(MemberLogEvent(LogEventKind.JOIN, guild, member))
    kick_line = render_event(KickLogEvent(guild=guild, member=member, entry=entry))

    assert join_line.endswith(discord.utils.escape_markdown("*bold*"))
    assert "*bold*" not in join_line
    assert "__mod__" not in kick_line
    assert "`code`" not in kick_line
    assert discord.utils.escape_markdown("__mod__") in kick_line


def test_multiline_reason_stays_on_one_line():
    guild = FakeGuild()
    user = FakeUser(42, "V")
    entry = AuditEntry(
        action=AuditAction.MEMBER_BAN_ADD, target_id=42, executor_tag="Mod#1", reason="spam\n# PWNED @everyone"
    )

    line = render_event(BanLogEvent(LogEventKind.BAN_WITH_CAUSE, guild, user, entry))

    assert "\n" not in line
    reason = discord.utils.escape_markdown("spam # PWNED @everyone")
    assert line == f":hammer: [BAN] by Mod#1 with reason {reason} | ID: 42 | V"


def test_multiline_names_stay_on_one_line():
    guild = FakeGuild()
    before = FakeMember(42, "victim", guild, nick="line one\n\n> quote")
    after = FakeMember(42, "victim", guild, nick="Champion\r\n# title")

    line = render_event(RenameLogEvent(before=before, after=after))

    assert "\n" not in line and "\r" not in line
    assert line.startswith(":abc: [RENAME] | ID: 42 | line one ")
