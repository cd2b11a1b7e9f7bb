from cashminder.utils.analytics import Aggregate, CategoryTotal, generate_insights


def breakdown(*items):
    return [
        CategoryTotal(category_id=name.lower(), category=name, amount=amount, color="#000000")
        for name, amount in items
    ]


def make_aggregate(income=0.0, expenses=0.0, categories=()):
    return Aggregate(
        total_income=income,
        total_expenses=expenses,
        net_savings=income - expenses,
        category_data=breakdown(*categories),
    )


def test_no_data_no_insights():
    assert generate_insights(make_aggregate(), make_aggregate()) == []


def test_high_savings_rate_is_positive():
    insights = generate_insights(make_aggregate(1000, 500), make_aggregate(1000, 500))
    assert len(insights) == 1
    assert insights[0].type == "positive"
    assert insights[0].title == "You saved 50% of your income this period"


def test_savings_rate_of_exactly_twenty_is_neutral():
    insights = generate_insights(make_aggregate(100, 80), make_aggregate(100, 80))
    assert insights[0].type == "neutral"
    assert insights[0].title == "You saved 20% of your income this period"


def test_overspending_is_negative_with_fixed_message():
    insights = generate_insights(make_aggregate(100, 100), make_aggregate(100, 100))
    assert insights[0].type == "negative"
    assert insights[0].title == "Your expenses exceeded your income this period"

    worse = generate_insights(make_aggregate(100, 400), make_aggregate(100, 400))
    assert worse[0].title == insights[0].title


def test_savings_rule_skipped_without_income():
    insights = generate_insights(make_aggregate(0, 50), make_aggregate(0, 0))
    assert all("saved" not in i.title and "exceeded" not in i.title for i in insights)


def test_category_increase_picks_largest_dollar_change():
    current = make_aggregate(5000, 1550, [("Rent", 1100), ("Food", 300), ("Fun", 150)])
    previous = make_aggregate(5000, 1300, [("Rent", 1000), ("Food", 200), ("Fun", 100)])

    increase = [i for i in generate_insights(current, previous) if i.title.startswith("Spending in")]
    assert len(increase) == 1
    assert increase[0].title == "Spending in Food increased by 50%"
    assert increase[0].type == "negative"


def test_category_increase_dollar_selection_percentage_message():
    # Coffee grew 200% but only $20; Rent grew 30% and $300
    current = make_aggregate(5000, 1330, [("Rent", 1300), ("Coffee", 30)])
    previous = make_aggregate(5000, 1010, [("Rent", 1000), ("Coffee", 10)])

    increase = [i for i in generate_insights(current, previous) if i.title.startswith("Spending in")]
    assert increase[0].title == "Spending in Rent increased by 30%"


def test_category_increase_tie_goes_to_first_in_current_order():
    current = make_aggregate(5000, 350, [("Groceries", 200), ("Transport", 150)])
    previous = make_aggregate(5000, 150, [("Groceries", 100), ("Transport", 50)])

    increase = [i for i in generate_insights(current, previous) if i.title.startswith("Spending in")]
    assert increase[0].title.startswith("Spending in Groceries")


def test_category_increase_needs_more_than_fifteen_percent():
    current = make_aggregate(5000, 1140, [("Rent", 1140)])
    previous = make_aggregate(5000, 1000, [("Rent", 1000)])

    titles = [i.title for i in generate_insights(current, previous)]
    assert not any(t.startswith("Spending in") for t in titles)


def test_category_increase_ignores_new_categories():
    current = make_aggregate(5000, 400, [("Travel", 400)])
    previous = make_aggregate(5000, 100, [("Food", 100)])

    titles = [i.title for i in generate_insights(current, previous)]
    assert not any(t.startswith("Spending in") for t in titles)


def test_top_category_share():
    current = make_aggregate(0, 400, [("Rent", 300), ("Food", 100)])
    insights = generate_insights(current, make_aggregate())

    top = [i for i in insights if "top spending category" in i.title]
    assert top[0].title == "Rent is your top spending category (75%)"
    assert top[0].description == "You spent $300.00 on Rent this period."
    assert top[0].type == "neutral"


def test_income_from_zero_is_a_hundred_percent_increase():
    insights = generate_insights(make_aggregate(500, 0), make_aggregate(0, 0))

    trend = insights[-1]
    assert trend.title == "Your income increased by 100%"
    assert trend.type == "positive"


def test_income_decrease_is_negative():
    insights = generate_insights(make_aggregate(800, 0), make_aggregate(1000, 0))
    assert insights[-1].title == "Your income decreased by 20%"
    assert insights[-1].type == "negative"


def test_small_income_change_is_ignored():
    insights = generate_insights(make_aggregate(1050, 0), make_aggregate(1000, 0))
    assert not any(i.title.startswith("Your income") for i in insights)


def test_rules_fire_in_fixed_order():
    current = make_aggregate(2000, 600, [("Food", 600)])
    previous = make_aggregate(1000, 300, [("Food", 300)])

    insights = generate_insights(current, previous)
    assert [i.title for i in insights] == [
        "You saved 70% of your income this period",
        "Spending in Food increased by 100%",
        "Food is your top spending category (100%)",
        "Your income increased by 100%",
    ]
