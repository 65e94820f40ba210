# tests/test_rsvp_submission.py
# =================================================================================
# 📝 Contrato de POST /api/rsvp
# ---------------------------------------------------------------------------------
# Orden de validación: campos obligatorios → invitación existe → no caducada → cupo.
# Upsert por invitación (gana la última respuesta) y aviso por email best-effort.
# =================================================================================

from datetime import timedelta

import pytest

from weddingsite import mailer, models
from weddingsite.crud import rsvps_crud, tables_crud
from weddingsite.crud.rsvps_crud import coerce_guests_count, is_expired
from weddingsite.utils.dates import utcnow


# =======================
# ✅ Camino feliz
# =======================
def test_attending_rsvp_is_saved_and_confirmed(submit, invite, rsvps_of):
    resp = submit(invite.id, guest_name="Ana Silva", attending=True, guests_count=2,
                  phone="+55 (11) 99999-0000", message="Mal podemos esperar!")

    assert resp.status_code == 200
    body = resp.json()
    assert body["success"] is True
    assert body["message"] == "RSVP confirmado com sucesso!"

    rows = rsvps_of(invite.id)
    assert len(rows) == 1
    assert rows[0].id == body["rsvpId"]
    assert rows[0].attending is True
    assert rows[0].guests_count == 2
    assert rows[0].event_id == invite.event_id


def test_declined_rsvp_stores_zero_guests(submit, invite, rsvps_of):
    resp = submit(invite.id, attending=False, guests_count=99)

    assert resp.status_code == 200
    assert rsvps_of(invite.id)[0].guests_count == 0


def test_guests_of_the_invite_are_marked_responded(submit, invite, db):
    assert submit(invite.id).status_code == 200

    db.expire_all()
    statuses = {g.status for g in db.query(models.Guest).filter(models.Guest.invite_id == invite.id)}
    assert statuses == {models.GuestStatusEnum.responded}


def test_event_id_comes_from_the_invite(submit, invite, other_event, rsvps_of):
    assert submit(invite.id, event_id=other_event.id).status_code == 200
    assert rsvps_of(invite.id)[0].event_id == invite.event_id


# =======================
# ⚠️ Campos obligatorios
# =======================
@pytest.mark.parametrize("missing, message", [
    ("invite_id", "ID do convite ausente."),
    ("guest_name", "Nome do convidado ausente."),
    ("attending", "Status de presença ausente."),
])
def test_missing_required_field_returns_400(client, invite, missing, message):
    body = {"invite_id": invite.id, "guest_name": "Ana Silva", "attending": True, "guests_count": 1}
    body.pop(missing)

    resp = client.post("/api/rsvp", json=body)

    assert resp.status_code == 400
    assert resp.json() == {"error": message}


def test_blank_guest_name_counts_as_missing(submit, invite):
    resp = submit(invite.id, guest_name="   ")
    assert resp.status_code == 400
    assert resp.json()["error"] == "Nome do convidado ausente."


def test_missing_fields_are_checked_before_invite_lookup(client):
    resp = client.post("/api/rsvp", json={"invite_id": "does-not-exist", "attending": True})
    assert resp.status_code == 400
    assert resp.json()["error"] == "Nome do convidado ausente."


# =======================
# 🚫 Invitación
# =======================
def test_unknown_invite_returns_404(submit):
    resp = submit("00000000-0000-0000-0000-000000000000")
    assert resp.status_code == 404
    assert resp.json() == {"error": "Convite inválido ou não encontrado."}


def test_expired_invite_returns_410(submit, make_invite, rsvps_of):
    inv = make_invite(max_guests=2, expires_in_days=-1)

    resp = submit(inv.id)

    assert resp.status_code == 410
    assert resp.json() == {"error": "Este convite expirou."}
    assert rsvps_of(inv.id) == []


def test_expiry_is_checked_before_guest_limit(submit, make_invite):
    inv = make_invite(max_guests=1, expires_in_days=-1)
    assert submit(inv.id, guests_count=5).status_code == 410


def test_is_expired_boundaries():
    assert not is_expired(models.Invite(expires_at=None))
    assert not is_expired(models.Invite(expires_at=utcnow() + timedelta(minutes=1)))
    assert is_expired(models.Invite(expires_at=utcnow() - timedelta(seconds=1)))


# =======================
# 👥 Cupo y coacción
# =======================
def test_guest_limit_exceeded_returns_400(submit, invite, rsvps_of):
    resp = submit(invite.id, guests_count=3)

    assert resp.status_code == 400
    assert resp.json() == {"error": "O número de convidados (3) excede o permitido (2)."}
    assert rsvps_of(invite.id) == []


def test_guest_limit_at_exact_maximum_is_accepted(submit, invite):
    assert submit(invite.id, guests_count=2).status_code == 200


@pytest.mark.parametrize("raw, expected", [
    (None, 1),
    (True, 1),
    ("abc", 1),
    ("", 1),
    (0, 1),
    (-4, 1),
    ("2", 2),
    ("2.7", 2),
    (3.0, 3),
])
def test_coerce_guests_count(raw, expected):
    assert coerce_guests_count(raw) == expected


def test_non_numeric_guests_count_is_treated_as_one(submit, make_invite, rsvps_of):
    inv = make_invite(max_guests=1)
    assert submit(inv.id, guests_count="muitos").status_code == 200
    assert rsvps_of(inv.id)[0].guests_count == 1


# =======================
# 🔁 Upsert (gana la última)
# =======================
def test_resubmission_updates_the_single_rsvp(submit, invite, rsvps_of):
    first = submit(invite.id, attending=True, guests_count=2, message="Vamos!").json()
    second = submit(invite.id, guest_name="João Silva", attending=False, message="Não poderemos ir").json()

    rows = rsvps_of(invite.id)
    assert len(rows) == 1
    assert first["rsvpId"] == second["rsvpId"]
    assert rows[0].guest_name == "João Silva"
    assert rows[0].attending is False
    assert rows[0].guests_count == 0
    assert rows[0].message == "Não poderemos ir"


def test_resubmission_keeps_table_and_created_at(submit, invite, db, rsvps_of):
    rsvp_id = submit(invite.id, guests_count=1).json()["rsvpId"]
    table = tables_crud.create_table(db, invite.event_id, "Mesa 1", 10)
    tables_crud.assign_rsvp(db, invite.event_id, rsvp_id, table.id)
    created_at = rsvps_of(invite.id)[0].created_at

    assert submit(invite.id, guests_count=2).status_code == 200

    row = rsvps_of(invite.id)[0]
    assert row.table_id == table.id
    assert row.created_at == created_at
    assert row.guests_count == 2


def test_resubmission_that_no_longer_fits_leaves_the_table(submit, make_invite, db, rsvps_of):
    inv = make_invite(max_guests=5, label="Primos")
    rsvp_id = submit(inv.id, guests_count=3).json()["rsvpId"]
    table = tables_crud.create_table(db, inv.event_id, "Mesa 3", 3)
    tables_crud.assign_rsvp(db, inv.event_id, rsvp_id, table.id)

    assert submit(inv.id, guests_count=5).status_code == 200

    row = rsvps_of(inv.id)[0]
    assert row.table_id is None
    assert row.guests_count == 5
    [status] = tables_crud.list_tables(db, inv.event_id)
    assert (status["current"], status["available"]) == (0, 3)


# =======================
# 👤 Nombre del invitado
# =======================
def test_name_outside_the_invite_list_is_rejected(submit, invite, rsvps_of):
    resp = submit(invite.id, guest_name="Alguém de Fora")

    assert resp.status_code == 400
    assert resp.json() == {"error": "Nome não encontrado na lista. Por favor, selecione uma das sugestões."}
    assert rsvps_of(invite.id) == []


def test_principal_name_without_companion_suffix_is_accepted(submit, invite):
    assert submit(invite.id, guest_name="joao silva").status_code == 200


def test_invite_without_names_accepts_any_name(submit, make_invite):
    inv = make_invite(max_guests=1, label="Colegas")
    assert submit(inv.id, guest_name="Qualquer Pessoa").status_code == 200


@pytest.mark.parametrize("bad_name", [12345, ["Ana Silva"]])
def test_non_string_guest_name_is_rejected(submit, invite, rsvps_of, bad_name):
    resp = submit(invite.id, guest_name=bad_name)

    assert resp.status_code == 422
    assert rsvps_of(invite.id) == []


# =======================
# 🌍 Idioma de los errores
# =======================
def test_error_language_follows_accept_language(client, make_invite):
    inv = make_invite(expires_in_days=-1)
    resp = client.post(
        "/api/rsvp",
        json={"invite_id": inv.id, "guest_name": "Ana", "attending": True},
        headers={"Accept-Language": "en-US,en;q=0.9"},
    )
    assert resp.json() == {"error": "This invite has expired."}


def test_payload_lang_wins_over_header(client, make_invite):
    inv = make_invite(expires_in_days=-1)
    resp = client.post(
        "/api/rsvp",
        json={"invite_id": inv.id, "guest_name": "Ana", "attending": True, "lang": "es"},
        headers={"Accept-Language": "en"},
    )
    assert resp.json() == {"error": "Esta invitación ha caducado."}


def test_invalid_body_returns_422_with_error(client, invite):
    resp = client.post("/api/rsvp", json={"invite_id": invite.id, "guest_name": "Ana", "attending": "talvez"})
    assert resp.status_code == 422
    assert "error" in resp.json()
    assert resp.json()["detail"]


# =======================
# 📧 Aviso a la pareja
# =======================
def test_owner_is_notified_after_saving(submit, invite, monkeypatch):
    sent = []
    monkeypatch.setattr(mailer, "send_rsvp_notification_email",
                        lambda to, summary, lang="pt": sent.append((to, summary, lang)) or True)

    assert submit(invite.id, guest_name="Ana Silva", guests_count=2).status_code == 200

    assert len(sent) == 1
    to, summary, lang = sent[0]
    assert to == "noivos@example.com"
    assert summary["guest_name"] == "Ana Silva"
    assert summary["guests_count"] == 2
    assert lang == "pt"


def test_email_failure_does_not_break_the_response(submit, invite, monkeypatch, rsvps_of):
    def _boom(*args, **kwargs):
        raise RuntimeError("SMTP down")

    monkeypatch.setattr(mailer, "send_rsvp_notification_email", _boom)

    resp = submit(invite.id)

    assert resp.status_code == 200
    assert len(rsvps_of(invite.id)) == 1


def test_notification_subject_reflects_attendance():
    subject, text, html = mailer.build_rsvp_notification(
        {"guest_name": "Ana", "attending": False, "event_title": "Ana & Rui"}, "pt"
    )
    assert subject == "RSVP: Ana - Recusado"
    assert "Ana & Rui" in text
    assert "<h2>" in html


# =======================
# 🎟️ Ticket
# =======================
def test_ticket_uses_default_label_without_invite_label(submit, make_invite, db):
    inv = make_invite(max_guests=1)
    rsvp_id = submit(inv.id).json()["rsvpId"]

    ticket = rsvps_crud.get_ticket(db, rsvp_id)

    assert ticket["invite_label"] == "Mesa Reservada"
    assert ticket["event_slug"] == "ana-e-rui"
    assert ticket["table_name"] is None
