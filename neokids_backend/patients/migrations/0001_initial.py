import django.db.models.deletion
from django.conf import settings
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name='Patient',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('name', models.CharField(max_length=100)),
                ('birth_date', models.DateField()),
                ('cpf', models.CharField(db_index=True, max_length=11, unique=True)),
                ('phone', models.CharField(max_length=11)),
                ('email', models.EmailField(blank=True, default='', max_length=254)),
                ('address', models.CharField(max_length=200)),
                ('responsible_name', models.CharField(max_length=100)),
                ('responsible_cpf', models.CharField(blank=True, default='', max_length=11)),
                ('responsible_phone', models.CharField(blank=True, default='', max_length=11)),
                ('special_alert', models.TextField(blank=True, default='')),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('created_by', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='+', to=settings.AUTH_USER_MODEL)),
            ],
            options={
                'verbose_name': 'Patient',
                'verbose_name_plural': 'Patients',
                'db_table': 'patients_patient',
                'ordering': ['name', 'id'],
            },
        ),
    ]
