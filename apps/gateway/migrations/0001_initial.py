import uuid

import django.db.models.deletion
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
    ]

    operations = [
        migrations.CreateModel(
            name='Customer',
            fields=[
                ('id', models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ('name', models.CharField(help_text='Customer or company name', max_length=200)),
                ('phone', models.CharField(db_index=True, help_text='Used to match enquiries to an existing customer', max_length=20)),
                ('location', models.CharField(blank=True, max_length=200)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
            ],
            options={
                'verbose_name': 'Customer',
                'verbose_name_plural': 'Customers',
                'db_table': 'customers',
                'ordering': ['name'],
            },
        ),
        migrations.CreateModel(
            name='Enquiry',
            fields=[
                ('id', models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ('date', models.DateField(help_text='Business date of the enquiry')),
                ('segment', models.CharField(choices=[('Agri', 'Agri'), ('Corporate', 'Corporate'), ('Others', 'Others')], default='Agri', max_length=20)),
                ('customer_name', models.CharField(max_length=200)),
                ('phone', models.CharField(max_length=20)),
                ('location', models.CharField(blank=True, max_length=200)),
                ('requirement_details', models.TextField()),
                ('status', models.CharField(choices=[('Lead', 'Lead'), ('Enquiry', 'Enquiry'), ('Quote', 'Quote'), ('Won', 'Won'), ('Loss', 'Loss')], db_index=True, default='Lead', max_length=20)),
                ('remarks', models.TextField(blank=True, default='')),
                ('reminder_date', models.DateField(blank=True, null=True)),
                ('assigned_to', models.CharField(blank=True, db_index=True, default='', help_text='Staff member tag', max_length=50)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('customer', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='enquiries', to='gateway.customer')),
            ],
            options={
                'verbose_name': 'Enquiry',
                'verbose_name_plural': 'Enquiries',
                'db_table': 'enquiries',
                'ordering': ['-created_at'],
            },
        ),
    ]
