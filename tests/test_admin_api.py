# tests/test_admin_api.py
# =================================================================================
# 👰🤵 Panel de la pareja: /api/admin/events/{event_id}/...
# =================================================================================

import re
from datetime import timedelta

import pytest

from weddingsite import auth, models
from weddingsite.crud import invites_crud
from weddingsite.utils.dates import utcnow

PNG_BYTES = b"\x89PNG\r\n\x1a\n" + b"\x00" * 32


@pytest.fixture
def base(event):
    return f"/api/admin/events/{event.id}"


# =======================
# 🔐 Acceso
# =======================
def test_admin_requires_credentials(client, base):
    assert client.get(base).status_code == 401
    assert client.get(base, headers={"Authorization": "Bearer not-a-jwt"}).status_code == 401


def test_couple_token_of_another_event_is_forbidden(client, base, other_event):
    headers = {"Authorization": f"Bearer {auth.create_access_token(other_event.id)}"}
    assert client.get(base, headers=headers).status_code == 403


def test_magic_token_is_not_a_session_token(client, base, event):
    headers = {"Authorization": f"Bearer {auth.create_magic_token(event.id, 'noivos@example.com')}"}
    assert client.get(base, headers=headers).status_code == 401


def test_owner_key_can_administer_any_event(client, base, owner_headers):
    resp = client.get(base, headers=owner_headers)
    assert resp.status_code == 200
    assert resp.json()["owner_email"] == "noivos@example.com"

    assert client.get("/api/admin/events/nope", headers=owner_headers).status_code == 404


# =======================
# 📋 Contenido del evento
# =======================
def test_patch_event_updates_only_sent_fields(client, base, couple_headers):
    resp = client.patch(base, headers=couple_headers, json={
        "venue_name": "Igreja Matriz",
        "contact_phones": ["+351 912 345 678", "  "],
    })

    assert resp.status_code == 200
    body = resp.json()
    assert body["venue_name"] == "Igreja Matriz"
    assert body["contact_phones"] == ["+351912345678"]
    assert body["title"] == "Ana & Rui"


def test_patch_event_rejects_null_title(client, base, couple_headers):
    resp = client.patch(base, headers=couple_headers, json={"title": None})

    assert resp.status_code == 422
    assert client.get(base, headers=couple_headers).json()["title"] == "Ana & Rui"


def test_replace_theme_keeps_a_single_row(client, base, couple_headers, db, event):
    resp = client.put(f"{base}/theme", headers=couple_headers, json={
        "template": "romantic", "colors": {"primary": "#C08497"},
    })

    assert resp.status_code == 200
    assert resp.json()["template"] == "romantic"
    assert resp.json()["fonts"]["heading"].startswith("'Outfit'")
    assert db.query(models.ThemeConfig).filter(models.ThemeConfig.event_id == event.id).count() == 1
    assert client.get("/api/events/ana-e-rui").json()["theme"]["template"] == "romantic"


def test_quiz_questions_are_positioned_in_order(client, base, couple_headers):
    q1 = client.post(f"{base}/quiz", headers=couple_headers, json={
        "question": "Onde se conheceram?", "options": ["Escola", "Praia"], "correct_answer": 1,
    })
    q2 = client.post(f"{base}/quiz", headers=couple_headers, json={
        "question": "Primeira viagem?", "options": ["Lisboa", "Paris", "Luanda"],
    })

    assert q1.status_code == 201 and q2.status_code == 201
    assert [q["position"] for q in client.get(f"{base}/quiz", headers=couple_headers).json()] == [0, 1]
    assert [q["question"] for q in client.get("/api/events/ana-e-rui").json()["quiz"]] == [
        "Onde se conheceram?", "Primeira viagem?",
    ]

    assert client.delete(f"{base}/quiz/{q1.json()['id']}", headers=couple_headers).status_code == 204
    assert client.delete(f"{base}/quiz/{q1.json()['id']}", headers=couple_headers).status_code == 404


@pytest.mark.parametrize("payload", [
    {"question": "Só uma opção?", "options": ["Sim"]},
    {"question": "Resposta fora?", "options": ["A", "B"], "correct_answer": 2},
])
def test_invalid_quiz_question_is_rejected(client, base, couple_headers, payload):
    assert client.post(f"{base}/quiz", headers=couple_headers, json=payload).status_code == 422


# =======================
# ✉️ Invitaciones
# =======================
def test_create_invite_generates_token_and_expiry(client, base, couple_headers):
    resp = client.post(f"{base}/invites", headers=couple_headers, json={
        "label": "  Família Costa ", "max_guests": 3, "guests": ["Rita Costa", "rita costa", " ", "Paulo Costa"],
    })

    assert resp.status_code == 201
    body = resp.json()
    assert re.fullmatch(r"[A-Z0-9]{8}", body["token"])
    assert body["label"] == "Família Costa"
    assert [g["name"] for g in body["guests"]] == ["Rita Costa", "Paulo Costa"]
    assert all(g["status"] == "pending" for g in body["guests"])
    assert body["expires_at"] is not None


def test_invite_max_guests_must_be_positive(client, base, couple_headers):
    resp = client.post(f"{base}/invites", headers=couple_headers, json={"label": "X", "max_guests": 0})
    assert resp.status_code == 422


def test_update_invite_syncs_guest_names(client, base, couple_headers, invite, db):
    ana_id = next(g.id for g in invite.guests if g.name == "Ana Silva")

    resp = client.patch(f"{base}/invites/{invite.id}", headers=couple_headers, json={
        "guests": ["Ana Silva", "Pedro Silva"], "max_guests": 3,
    })

    assert resp.status_code == 200
    guests = {g["name"]: g["id"] for g in resp.json()["guests"]}
    assert set(guests) == {"Ana Silva", "Pedro Silva"}
    assert guests["Ana Silva"] == ana_id
    assert resp.json()["max_guests"] == 3
    assert resp.json()["label"] == "Família Silva"


def test_update_invite_can_clear_label(client, base, couple_headers, invite):
    resp = client.patch(f"{base}/invites/{invite.id}", headers=couple_headers, json={"label": None})
    assert resp.json()["label"] is None
    assert len(resp.json()["guests"]) == 2


def test_invite_of_another_event_is_not_found(client, base, couple_headers, other_event, db):
    foreign = invites_crud.create_invite(db, other_event, {"label": "Alheio", "max_guests": 1})

    resp = client.patch(f"{base}/invites/{foreign.id}", headers=couple_headers, json={"label": "Meu"})

    assert resp.status_code == 404
    assert resp.json()["detail"] == "Convite não encontrado."


def test_delete_invite_removes_its_rsvp(client, base, couple_headers, invite, submit, db):
    submit(invite.id)

    assert client.delete(f"{base}/invites/{invite.id}", headers=couple_headers).status_code == 204

    assert client.get(f"{base}/invites", headers=couple_headers).json() == []
    db.expire_all()
    assert db.query(models.RSVP).count() == 0
    assert db.query(models.Guest).count() == 0


def test_share_link_builds_whatsapp_message(client, base, couple_headers, invite):
    body = client.get(f"{base}/invites/{invite.id}/share", headers=couple_headers).json()

    assert body["url"] == f"https://convite.example.com/ana-e-rui/rsvp?token={invite.token}"
    assert body["whatsapp_text"].startswith("Olá Ana Silva & João Silva e esposa!")
    assert body["url"] in body["whatsapp_text"]
    assert body["whatsapp_url"].startswith("https://api.whatsapp.com/send?text=Ol%C3%A1")


def test_bulk_import_reports_row_errors_without_aborting(client, base, couple_headers):
    resp = client.post(f"{base}/invites/import", headers=couple_headers, json={"items": [
        {"label": "Família Souza", "max_guests": 2, "guests": "Carla Souza; Marcos Souza"},
        {"max_guests": 1},
        {"label": "família souza", "max_guests": 1},
        {"label": "Sem cupo", "max_guests": 0},
        {"guests": ["Beatriz"], "allow_plus_one": True},
    ]})

    assert resp.status_code == 200
    body = resp.json()
    assert body["created"] == 2
    assert body["skipped"] == 1
    assert len(body["errors"]) == 2
    assert body["errors"][0].startswith("Fila 2")
    assert body["errors"][1].startswith("Fila 4")
    assert len(body["tokens"]) == 2

    invites = client.get(f"{base}/invites", headers=couple_headers).json()
    souza = next(i for i in invites if i["label"] == "Família Souza")
    assert sorted(g["name"] for g in souza["guests"]) == ["Carla Souza", "Marcos Souza"]


def test_bulk_import_accepts_rows_alias(client, base, couple_headers):
    resp = client.post(f"{base}/invites/import", headers=couple_headers, json={"rows": [{"label": "A"}]})
    assert resp.json()["created"] == 1


# =======================
# 📝 Respuestas y KPIs
# =======================
def test_rsvp_list_filters_and_stats(client, base, couple_headers, invite, make_invite, submit):
    other = make_invite(max_guests=3, label="Amigos do Rui")
    submit(invite.id, guest_name="Ana Silva", attending=True, guests_count=2)
    submit(other.id, guest_name="Bruno Lima", attending=False)

    all_rows = client.get(f"{base}/rsvps", headers=couple_headers).json()
    assert {r["guest_name"] for r in all_rows} == {"Ana Silva", "Bruno Lima"}

    attending = client.get(f"{base}/rsvps", headers=couple_headers, params={"status": "attending"}).json()
    assert [r["guest_name"] for r in attending] == ["Ana Silva"]

    by_label = client.get(f"{base}/rsvps", headers=couple_headers, params={"search": "amigos"}).json()
    assert [r["guest_name"] for r in by_label] == ["Bruno Lima"]

    stats = client.get(f"{base}/stats", headers=couple_headers).json()
    assert stats == {
        "total_invites": 2,
        "total_guests_listed": 5,
        "confirmed_guests": 2,
        "declined": 1,
        "pending_invites": 0,
    }


def test_invalid_status_filter_is_rejected(client, base, couple_headers):
    assert client.get(f"{base}/rsvps", headers=couple_headers, params={"status": "maybe"}).status_code == 422


def test_delete_rsvp_returns_guests_to_pending(client, base, couple_headers, invite, submit, db):
    rsvp_id = submit(invite.id).json()["rsvpId"]

    assert client.delete(f"{base}/rsvps/{rsvp_id}", headers=couple_headers).status_code == 204

    db.expire_all()
    assert {g.status for g in db.query(models.Guest)} == {models.GuestStatusEnum.pending}
    assert client.get(f"{base}/stats", headers=couple_headers).json()["pending_invites"] == 1


# =======================
# 🪑 Mesas
# =======================
def test_table_assignment_rules(client, base, couple_headers, make_invite, submit):
    inv_a, inv_b, inv_c = make_invite(max_guests=2), make_invite(max_guests=2), make_invite(max_guests=1)
    a = submit(inv_a.id, guest_name="Ana", guests_count=2).json()["rsvpId"]
    b = submit(inv_b.id, guest_name="Bia", guests_count=2).json()["rsvpId"]
    c = submit(inv_c.id, guest_name="Caio", attending=False).json()["rsvpId"]

    table = client.post(f"{base}/tables", headers=couple_headers, json={"name": "Mesa 1", "capacity": 3}).json()
    assert table["current"] == 0 and table["available"] == 3

    def assign(rsvp_id, table_id=table["id"]):
        return client.post(f"{base}/tables/assign", headers=couple_headers,
                           json={"rsvp_id": rsvp_id, "table_id": table_id})

    assert assign(a).status_code == 200

    full = assign(b)
    assert full.status_code == 409
    assert full.json()["detail"] == "Mesa cheia! Capacidade: 3, Disponível: 1, Necessário: 2"

    again = assign(a)
    assert again.status_code == 409
    assert again.json()["detail"] == "O convidado já está nesta mesa."

    declined = assign(c)
    assert declined.status_code == 409
    assert declined.json()["detail"] == "Só convidados confirmados podem ser sentados."

    [status] = client.get(f"{base}/tables", headers=couple_headers).json()
    assert (status["current"], status["available"], status["is_full"]) == (2, 1, False)
    assert [r["guest_name"] for r in status["rsvps"]] == ["Ana"]

    unassigned = assign(a, table_id=None)
    assert unassigned.status_code == 200
    assert unassigned.json()["table_id"] is None


def test_table_defaults_to_ten_seats(client, base, couple_headers):
    table = client.post(f"{base}/tables", headers=couple_headers, json={"name": "Mesa dos noivos"}).json()
    assert table["capacity"] == 10


def test_deleting_a_table_unseats_its_rsvps(client, base, couple_headers, invite, submit, db):
    rsvp_id = submit(invite.id, guests_count=2).json()["rsvpId"]
    table = client.post(f"{base}/tables", headers=couple_headers, json={"name": "Mesa 2"}).json()
    client.post(f"{base}/tables/assign", headers=couple_headers, json={"rsvp_id": rsvp_id, "table_id": table["id"]})

    assert client.delete(f"{base}/tables/{table['id']}", headers=couple_headers).status_code == 204

    db.expire_all()
    assert db.get(models.RSVP, rsvp_id).table_id is None


def test_ticket_shows_table_name(client, base, couple_headers, invite, submit):
    rsvp_id = submit(invite.id).json()["rsvpId"]
    table = client.post(f"{base}/tables", headers=couple_headers, json={"name": "Mesa Jasmim"}).json()
    client.post(f"{base}/tables/assign", headers=couple_headers, json={"rsvp_id": rsvp_id, "table_id": table["id"]})

    assert client.get(f"/api/rsvps/{rsvp_id}/ticket").json()["table_name"] == "Mesa Jasmim"


# =======================
# 💬 Moderación
# =======================
def test_moderation_clears_rsvp_message_and_deletes_public_one(client, base, couple_headers, invite, submit, db):
    rsvp_id = submit(invite.id, message="Viva os noivos!").json()["rsvpId"]
    public_id = client.post("/api/events/ana-e-rui/messages", json={"name": "Tio", "message": "Oi"}).json()["id"]

    assert len(client.get(f"{base}/messages", headers=couple_headers).json()) == 2

    assert client.delete(f"{base}/messages/{rsvp_id}", headers=couple_headers).json() == {"ok": True, "type": "rsvp"}
    assert client.delete(f"{base}/messages/{public_id}", headers=couple_headers).json() == {"ok": True, "type": "public"}

    assert client.get("/api/events/ana-e-rui/messages").json() == []
    db.expire_all()
    row = db.get(models.RSVP, rsvp_id)
    assert row is not None and row.message is None


def test_moderating_unknown_message_returns_404(client, base, couple_headers):
    assert client.delete(f"{base}/messages/public-nope", headers=couple_headers).status_code == 404
    assert client.delete(f"{base}/messages/nope", headers=couple_headers).status_code == 404


# =======================
# 🎟️ Tickets guardados
# =======================
def test_list_and_delete_ticket_images(client, base, couple_headers, invite, submit):
    rsvp_id = submit(invite.id).json()["rsvpId"]
    client.post(f"/api/rsvps/{rsvp_id}/ticket-image", files={"file": ("t.png", PNG_BYTES, "image/png")})

    tickets = client.get(f"{base}/tickets", headers=couple_headers).json()
    assert [t["path"] for t in tickets] == [f"ana-e-rui/{rsvp_id}.png"]

    assert client.delete(f"{base}/tickets/{rsvp_id}.png", headers=couple_headers).status_code == 204
    assert client.delete(f"{base}/tickets/{rsvp_id}.png", headers=couple_headers).status_code == 404
    assert client.get(f"{base}/tickets", headers=couple_headers).json() == []


def test_invite_listing_shows_expiry(client, base, couple_headers, invite, db):
    invite.expires_at = utcnow() + timedelta(days=1)
    db.commit()

    [row] = client.get(f"{base}/invites", headers=couple_headers).json()
    assert row["token"] == invite.token
    assert row["expires_at"] is not None
