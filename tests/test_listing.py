from datetime import date, timedelta

from services.listing import Section, age_cutoff, list_section_profiles

TODAY = date(2024, 1, 1)


def _names(profiles):
    return {p.name for p in profiles}


def test_age_cutoff():
    assert age_cutoff(TODAY) == date(2006, 1, 1)


def test_age_cutoff_leap_day_rolls_forward():
    assert age_cutoff(date(2024, 2, 29)) == date(2006, 3, 1)


def test_sections_partition_by_age(run_db, add_profile):
    add_profile(name="Ana Ruiz", birth_date=date(2010, 1, 1), gender="Female")
    add_profile(name="Fabio Levy", birth_date=date(1990, 5, 17), gender="Male")
    add_profile(name="Turns Eighteen Today", birth_date=date(2006, 1, 1), gender="Male")
    add_profile(name="Eighteen Tomorrow", birth_date=date(2006, 1, 2), gender="Male")
    add_profile(name="Marta Gil", birth_date=date(1985, 3, 3), gender="Female")

    actors = run_db(list_section_profiles, Section.actors, today=TODAY)
    actresses = run_db(list_section_profiles, Section.actresses, today=TODAY)
    young = run_db(list_section_profiles, Section.young_actors, today=TODAY)

    assert _names(actors) == {"Fabio Levy", "Turns Eighteen Today"}
    assert _names(actresses) == {"Marta Gil"}
    assert _names(young) == {"Ana Ruiz", "Eighteen Tomorrow"}
    assert not _names(actors) & _names(young)


def test_ana_ruiz_is_a_young_actor_not_an_actor(run_db, add_profile):
    add_profile(name="Ana Ruiz", birth_date=date(2010, 1, 1), gender="Male")

    assert _names(run_db(list_section_profiles, Section.young_actors, today=TODAY)) == {"Ana Ruiz"}
    assert _names(run_db(list_section_profiles, Section.actors, today=TODAY)) == set()


def test_actor_section_filters_gender(run_db, add_profile):
    add_profile(name="Marta Gil", birth_date=date(1985, 3, 3), gender="Female")
    add_profile(name="No Gender", birth_date=date(1985, 3, 3))

    assert run_db(list_section_profiles, Section.actors, today=TODAY) == []


def test_section_endpoint_uses_current_date(client, add_profile):
    cutoff = age_cutoff()
    add_profile(name="Adult", birth_date=cutoff - timedelta(days=1), gender="Male", primary_image="https://img/1.jpg")
    add_profile(name="Minor", birth_date=cutoff + timedelta(days=1), gender="Male")

    actors = client.get("/api/profiles/section/actors").json()
    young = client.get("/api/profiles/section/young_actors").json()

    assert [p["name"] for p in actors] == ["Adult"]
    assert actors[0]["primary_image"] == "https://img/1.jpg"
    assert [p["name"] for p in young] == ["Minor"]


def test_unknown_section(client):
    assert client.get("/api/profiles/section/directors").status_code == 422
