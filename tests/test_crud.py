from sqlalchemy import select

from contactbook import crud, models


def memberships(db_session, contact_id):
    link = models.contacts_groups
    return db_session.execute(
        select(link).where(link.c.contact_id == contact_id)
    ).all()


def add(db_session, owner, first="Ada", last="Lovelace", phone="5551234567"):
    assert crud.add_contact(db_session, first, last, phone, owner.id)
    return next(c for c in crud.list_contacts(db_session, owner.id) if c.phone_number == phone)


def make_group(db_session, owner, name):
    assert crud.create_group(db_session, name, owner.id)
    return next(g for g in crud.list_groups(db_session, owner.id) if g.group_name == name)


def test_added_contact_is_listed_with_empty_groups(db_session, user):
    assert crud.add_contact(db_session, "Ada", "Lovelace", "5551234567", user.id)

    contacts = crud.list_contacts(db_session, user.id)
    assert len(contacts) == 1
    assert contacts[0].first_name == "Ada"
    assert contacts[0].last_name == "Lovelace"
    assert contacts[0].phone_number == "5551234567"
    assert contacts[0].group_name == []


def test_membership_scenario(db_session, user):
    contact = add(db_session, user)
    friends = make_group(db_session, user, "Friends")

    assert crud.toggle_group_membership(db_session, contact.id, friends.id, user.id)
    assert crud.get_contact(db_session, contact.id, user.id).group_name == ["Friends"]

    assert crud.toggle_group_membership(db_session, contact.id, friends.id, user.id)
    assert crud.get_contact(db_session, contact.id, user.id).group_name == []

    assert crud.delete_contact(db_session, contact.id, user.id)
    assert crud.list_contacts(db_session, user.id) == []


def test_group_names_sorted_case_insensitively(db_session, user):
    contact = add(db_session, user)
    for name in ["work", "Family", "book club", "Zoo"]:
        group = make_group(db_session, user, name)
        crud.toggle_group_membership(db_session, contact.id, group.id, user.id)

    expected = ["book club", "Family", "work", "Zoo"]
    assert crud.get_contact(db_session, contact.id, user.id).group_name == expected
    assert crud.list_contacts(db_session, user.id)[0].group_name == expected


def test_group_name_order_ignores_insertion_order(db_session, user, other_user):
    names = ["b", "a", "B"]
    for owner, order in ((user, names), (other_user, list(reversed(names)))):
        contact = add(db_session, owner)
        for name in order:
            group = make_group(db_session, owner, name)
            crud.toggle_group_membership(db_session, contact.id, group.id, owner.id)

    for owner in (user, other_user):
        assert crud.list_contacts(db_session, owner.id)[0].group_name == ["a", "B", "b"]


def test_delete_contact_without_groups_succeeds(db_session, user):
    contact = add(db_session, user)
    assert crud.delete_contact(db_session, contact.id, user.id)
    assert crud.get_contact(db_session, contact.id, user.id) is None


def test_delete_contact_removes_memberships(db_session, user):
    contact = add(db_session, user)
    group = make_group(db_session, user, "Friends")
    crud.toggle_group_membership(db_session, contact.id, group.id, user.id)

    assert crud.delete_contact(db_session, contact.id, user.id)
    assert memberships(db_session, contact.id) == []


def test_delete_missing_contact_fails(db_session, user):
    assert not crud.delete_contact(db_session, 999, user.id)


def test_delete_group_removes_memberships(db_session, user):
    contact = add(db_session, user)
    group = make_group(db_session, user, "Friends")
    crud.toggle_group_membership(db_session, contact.id, group.id, user.id)

    assert crud.delete_group(db_session, group.id, user.id)
    assert crud.list_groups(db_session, user.id) == []
    assert memberships(db_session, contact.id) == []
    assert crud.get_contact(db_session, contact.id, user.id).group_name == []


def test_contacts_are_scoped_to_owner(db_session, user, other_user):
    contact = add(db_session, user)
    group = make_group(db_session, user, "Friends")

    assert crud.list_contacts(db_session, other_user.id) == []
    assert crud.list_groups(db_session, other_user.id) == []
    assert crud.get_contact(db_session, contact.id, other_user.id) is None
    assert not crud.update_first_name(db_session, "Eve", contact.id, other_user.id)
    assert not crud.toggle_group_membership(db_session, contact.id, group.id, other_user.id)
    assert not crud.delete_group(db_session, group.id, other_user.id)
    assert not crud.delete_contact(db_session, contact.id, other_user.id)

    assert crud.get_contact(db_session, contact.id, user.id).first_name == "Ada"


def test_toggle_rejects_foreign_group(db_session, user, other_user):
    contact = add(db_session, user)
    foreign = make_group(db_session, other_user, "Theirs")

    assert not crud.toggle_group_membership(db_session, contact.id, foreign.id, user.id)
    assert memberships(db_session, contact.id) == []


def test_same_phone_number_allowed_for_different_owners(db_session, user, other_user):
    assert crud.add_contact(db_session, "Ada", "Lovelace", "5551234567", user.id)
    assert crud.add_contact(db_session, "Ada", "Lovelace", "5551234567", other_user.id)


def test_duplicate_phone_number_rejected_by_storage(db_session, user):
    assert crud.add_contact(db_session, "Ada", "Lovelace", "5551234567", user.id)
    assert not crud.add_contact(db_session, "Grace", "Hopper", "5551234567", user.id)
    assert len(crud.list_contacts(db_session, user.id)) == 1


def test_duplicate_group_name_rejected_by_storage(db_session, user):
    assert crud.create_group(db_session, "Friends", user.id)
    assert not crud.create_group(db_session, "Friends", user.id)


def test_single_field_updates(db_session, user):
    contact = add(db_session, user)

    assert crud.update_first_name(db_session, "Augusta", contact.id, user.id)
    assert crud.update_last_name(db_session, "King", contact.id, user.id)
    assert crud.update_phone_number(db_session, "5559876543", contact.id, user.id)

    updated = crud.get_contact(db_session, contact.id, user.id)
    assert (updated.first_name, updated.last_name, updated.phone_number) == (
        "Augusta",
        "King",
        "5559876543",
    )


def test_update_phone_number_to_existing_one_fails(db_session, user):
    add(db_session, user)
    grace = add(db_session, user, "Grace", "Hopper", "5550000000")

    assert not crud.update_phone_number(db_session, "5551234567", grace.id, user.id)
    assert crud.get_contact(db_session, grace.id, user.id).phone_number == "5550000000"


def test_update_missing_contact_fails(db_session, user):
    assert not crud.update_last_name(db_session, "Nobody", 42, user.id)
