from django.db import migrations, models


def count(label):
    return models.PositiveIntegerField(blank=True, null=True, verbose_name=label)


def yes_no(label):
    return models.BooleanField(blank=True, null=True, verbose_name=label)


TYPED_COLUMNS = [
    ("one_to_one_meeting", count("1 to 1 meetings")),
    ("under_tabligh", count("people under tabligh")),
    ("book_stall", count("book stalls")),
    ("literature_distributed", count("literature distributed")),
    ("new_contacts", count("new contacts")),
    ("exhibitions", count("exhibitions")),
    ("dain_e_ilallah", count("dain-e-ilallah")),
    ("baiats", count("baiats")),
    ("tabligh_days_held", count("tabligh days held")),
    ("digital_content_created", count("digital content created")),
    ("merch_reflector_jackets", count("reflector jackets")),
    ("merch_tshirts", count("t-shirts")),
    ("merch_caps", count("caps")),
    ("merch_stickers", count("stickers")),
    ("monthly_report", yes_no("monthly report sent")),
    ("amila_meeting", count("amila meetings")),
    ("general_meeting", count("general meetings")),
    ("visited_nazm_e_ala", yes_no("visited by nazm-e-ala")),
    ("talim_ul_quran_held", count("talim-ul-quran classes held")),
    ("ansar_attending", count("ansar attending")),
    ("avg_ansar_joining_weekly_quran", models.DecimalField(
        blank=True, decimal_places=2, max_digits=8, null=True,
        verbose_name="average ansar joining the weekly quran class",
    )),
    ("ansar_reading_book", count("ansar reading the book")),
    ("ansar_participated_exam", count("ansar in the exam")),
    ("ansar_visiting_sick", count("ansar visiting the sick")),
    ("ansar_visiting_elderly", count("ansar visiting the elderly")),
    ("feed_hungry_program_held", count("feed the hungry programmes")),
    ("ansar_participated_feed_hungry", count("ansar in feed the hungry")),
    ("ansar_regular_exercise", count("ansar exercising regularly")),
    ("ansar_owns_bicycle", count("ansar owning a bicycle")),
]


class Migration(migrations.Migration):
    '''
    Per-field typed columns on other_reports. Deployments that have not run
    this migration keep working from report_data.
    '''

    dependencies = [
        ("reports", "0001_initial"),
    ]

    operations = [
        migrations.AddField(model_name="departmentalreport", name=name, field=field)
        for name, field in TYPED_COLUMNS
    ]
