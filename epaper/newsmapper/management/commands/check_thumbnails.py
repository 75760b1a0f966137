from django.core.management.base import BaseCommand

from newsmapper.models import Newspaper


class Command(BaseCommand):
    help = 'List the most recent newspapers and whether their gallery cover was generated.'

    def add_arguments(self, parser):
        parser.add_argument('--limit', type=int, default=10, help='Number of newspapers to list')

    def handle(self, *args, **options):
        newspapers = Newspaper.objects.order_by('-uploaded_at')[:options['limit']]
        for newspaper in newspapers:
            cover = newspaper.cover_image_url
            self.stdout.write(
                f'Title: {newspaper.title} | Has Image: {bool(cover)} | Image Length: {len(cover)}'
            )
        if not newspapers:
            self.stdout.write(self.style.WARNING('No newspapers uploaded yet.'))
