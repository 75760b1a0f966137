import json
import logging

from django.conf import settings
from django.contrib.admin.views.decorators import staff_member_required
from django.db import DatabaseError
from django.db.models import F
from django.http import Http404, HttpResponse, JsonResponse
from django.shortcuts import get_object_or_404, redirect, render
from django.urls import reverse
from django.utils import timezone
from django.utils.text import slugify
from django.views.decorators.http import require_GET, require_POST

from . import editor
from .forms import MappedAreaForm, MappedAreaPayloadForm, UploadNewspaperForm
from .models import Category, MappedArea, Newspaper
from .overlay import dispatch_click, project
from .rendering import PageOutOfRange, open_document, page_count, page_size, render_page, render_page_png
from .snippets import extract, is_suspicious
from .tasks import prepare_newspaper
from .utils import decode_data_url, uploaded_file_to_data_url

logger = logging.getLogger(__name__)

GUEST_PAGE_LIMIT = getattr(settings, 'GUEST_PAGE_LIMIT', 2)
MIN_ZOOM = getattr(settings, 'MIN_ZOOM', 0.6)
MAX_ZOOM = getattr(settings, 'MAX_ZOOM', 2.5)
ZOOM_STEP = getattr(settings, 'ZOOM_STEP', 0.1)
SNIPPET_PIXEL_RATIO = getattr(settings, 'SNIPPET_PIXEL_RATIO', 2.0)


def _error(message, status=400):
    return JsonResponse({'status': 'error', 'message': message}, status=status)


def _request_data(request):
    if request.content_type == 'application/json':
        try:
            return json.loads(request.body.decode('utf-8') or '{}')
        except (UnicodeDecodeError, json.JSONDecodeError):
            return None
    return request.POST


def _int_param(value, default):
    try:
        return int(value)
    except (TypeError, ValueError):
        return default


def _float_param(value, default):
    try:
        return float(value)
    except (TypeError, ValueError):
        return default


def _clamp(value, low, high):
    return min(max(value, low), high)


def _clamp_zoom(scale):
    return round(_clamp(scale, MIN_ZOOM, MAX_ZOOM), 2)


def _ensure_page_count(newspaper):
    if not newspaper.page_count:
        doc = open_document(newspaper)
        try:
            newspaper.page_count = page_count(doc)
        finally:
            doc.close()
        newspaper.save(update_fields=['page_count'])
    return newspaper.page_count


def _readable_newspaper(request, newspaper_id):
    newspaper = get_object_or_404(Newspaper, pk=newspaper_id)
    if not newspaper.is_published and not request.user.is_staff:
        raise Http404('Newspaper not found')
    return newspaper


def _visible_pages(request, newspaper):
    total_pages = _ensure_page_count(newspaper)
    if request.user.is_authenticated:
        return total_pages
    return min(total_pages, GUEST_PAGE_LIMIT)


# Reader views

def home(request):
    newspapers = Newspaper.objects.filter(is_published=True)
    return render(request, 'newsmapper/home.html', {'newspapers': newspapers})


@require_GET
def newspaper_list(request):
    newspapers = Newspaper.objects.filter(is_published=True)
    return JsonResponse({'newspapers': [newspaper.to_summary() for newspaper in newspapers]})


@require_GET
def newspaper_detail(request, newspaper_id):
    newspaper = _readable_newspaper(request, newspaper_id)
    record = newspaper.to_record()
    logger.info('Fetching newspaper: %s', newspaper.title)
    for area in record['mappedAreas']:
        logger.debug(' - Area "%s" image size: %s bytes',
                     area['headline'], len(area['extractedImageUrl'] or ''))
    return JsonResponse(record)


@require_GET
def increment_view_count(request, newspaper_id):
    updated = Newspaper.objects.filter(pk=newspaper_id).update(view_count=F('view_count') + 1)
    if not updated:
        return _error('Newspaper not found', status=404)
    return JsonResponse({'message': 'View count incremented'})


@require_GET
def viewer(request, newspaper_id):
    newspaper = _readable_newspaper(request, newspaper_id)
    num_pages = _visible_pages(request, newspaper)
    page_number = _clamp(_int_param(request.GET.get('page'), 1), 1, max(num_pages, 1))
    scale = _clamp_zoom(_float_param(request.GET.get('scale'), 1.0))

    areas = list(MappedArea.objects.for_newspaper(newspaper))
    hotspots = project(areas, page_number)

    context = {
        'newspaper': newspaper,
        'page_number': page_number,
        'num_pages': num_pages,
        'pages': range(1, num_pages + 1),
        'previous_page': page_number - 1 if page_number > 1 else None,
        'next_page': page_number + 1 if page_number < num_pages else None,
        'scale': scale,
        'zoom_percent': round(scale * 100),
        'zoom_out': _clamp_zoom(scale - ZOOM_STEP),
        'zoom_in': _clamp_zoom(scale + ZOOM_STEP),
        'hotspots': hotspots,
        'is_guest': not request.user.is_authenticated,
    }
    return render(request, 'newsmapper/viewer.html', context)


@require_GET
def hotspot_at(request, newspaper_id):
    newspaper = _readable_newspaper(request, newspaper_id)
    page_number = _int_param(request.GET.get('page'), None)
    x = _float_param(request.GET.get('x'), None)
    y = _float_param(request.GET.get('y'), None)
    width = _float_param(request.GET.get('width'), None)
    height = _float_param(request.GET.get('height'), None)
    if None in (page_number, x, y, width, height) or width <= 0 or height <= 0:
        return _error('page, x, y, width and height are required.')

    areas = list(MappedArea.objects.for_newspaper(newspaper))
    boxes = project(areas, page_number, width, height)
    record = dispatch_click(boxes, x, y, lambda area: area.to_record())
    if record is None:
        return _error('No area at this point.', status=404)
    return JsonResponse({'status': 'success', 'area': record})


@require_GET
def page_image(request, newspaper_id, page_number):
    newspaper = _readable_newspaper(request, newspaper_id)
    if page_number < 1 or page_number > _ensure_page_count(newspaper):
        return _error('Page number out of range.', status=404)
    if page_number > _visible_pages(request, newspaper):
        return _error('Login for full access.', status=403)
    scale = _clamp(_float_param(request.GET.get('scale'), 1.0), MIN_ZOOM, MAX_ZOOM * SNIPPET_PIXEL_RATIO)
    try:
        content = render_page_png(newspaper, page_number, scale)
    except PageOutOfRange:
        return _error('Page number out of range.', status=404)
    return HttpResponse(content, content_type='image/png')


@require_GET
def area_detail(request, newspaper_id, area_id):
    newspaper = _readable_newspaper(request, newspaper_id)
    area = get_object_or_404(MappedArea, pk=area_id, newspaper=newspaper)
    return render(request, 'newsmapper/area_detail.html', {'newspaper': newspaper, 'area': area})


@require_GET
def area_image(request, newspaper_id, area_id):
    newspaper = _readable_newspaper(request, newspaper_id)
    area = get_object_or_404(MappedArea, pk=area_id, newspaper=newspaper)
    mime_type, content = decode_data_url(area.extracted_image_url)
    if content is None:
        return _error('No image snippet available.', status=404)
    response = HttpResponse(content, content_type=mime_type)
    filename = f'article-{slugify(area.headline) or "news"}.jpg'
    response['Content-Disposition'] = f'attachment; filename="{filename}"'
    return response


# Admin views

@staff_member_required
def dashboard(request):
    return render(request, 'newsmapper/dashboard.html', {'newspapers': Newspaper.objects.all()})


@staff_member_required
def upload_newspaper(request):
    if request.method == 'POST':
        form = UploadNewspaperForm(request.POST, request.FILES)
        if form.is_valid():
            newspaper = Newspaper(
                title=form.cleaned_data['title'],
                description=form.cleaned_data['description'],
                date=form.cleaned_data['date'],
                uploaded_by=request.user,
            )
            newspaper.pdf.save(form.cleaned_data['pdf_file'].name, form.cleaned_data['pdf_file'], save=False)
            newspaper.save()
            logger.info('Uploaded newspaper "%s" as %s', newspaper.title, newspaper.pdf.name)
            prepare_newspaper.delay(newspaper.pk)
            return redirect('dashboard')
        error_message = 'Form is not valid.'
        return render(request, 'newsmapper/upload.html', {'form': form, 'error_message': error_message}, status=400)

    form = UploadNewspaperForm()
    return render(request, 'newsmapper/upload.html', {'form': form})


@staff_member_required
@require_POST
def toggle_publish(request, newspaper_id):
    newspaper = get_object_or_404(Newspaper, pk=newspaper_id)
    newspaper.is_published = not newspaper.is_published
    if newspaper.is_published:
        newspaper.published_at = timezone.now()
    newspaper.save(update_fields=['is_published', 'published_at'])
    return JsonResponse(newspaper.to_summary())


@staff_member_required
@require_POST
def delete_newspaper(request, newspaper_id):
    newspaper = get_object_or_404(Newspaper, pk=newspaper_id)
    pdf_name = newspaper.pdf.name
    newspaper.delete()
    if pdf_name:
        newspaper.pdf.storage.delete(pdf_name)
    logger.info('Deleted newspaper %s and %s', newspaper_id, pdf_name)
    return JsonResponse({'message': 'Newspaper removed'})


@staff_member_required
@require_POST
def add_mapped_area(request, newspaper_id):
    newspaper = get_object_or_404(Newspaper, pk=newspaper_id)
    data = _request_data(request)
    if data is None:
        return _error('Invalid JSON body.')
    form = MappedAreaPayloadForm(data)
    if not form.is_valid():
        return _error(form.errors.as_text())
    if newspaper.page_count and form.cleaned_data['pageNumber'] > newspaper.page_count:
        return _error('Page number out of range.')

    logger.info('Mapping area request received: %s', {
        'headline': form.cleaned_data['headline'],
        'category': form.cleaned_data['category'],
        'hasImage': bool(form.cleaned_data['imageData']),
    })
    try:
        area = MappedArea.objects.create_for(newspaper, form.cleaned_data)
    except DatabaseError as e:
        logger.error('Add mapped area failed: %s', e)
        return _error(f'Server Error: {e}', status=500)
    logger.info('Saved area for "%s". Image size: %s bytes', area.headline, len(area.extracted_image_url))
    areas = MappedArea.objects.for_newspaper(newspaper)
    return JsonResponse({'mappedAreas': [a.to_record() for a in areas]}, status=201)


# Mapper (region editor) views

def _load_editor(request, newspaper):
    data = request.session.get(editor.session_key(newspaper.pk))
    return editor.DrawState.from_session(data) if data else None


def _store_editor(request, newspaper, state):
    request.session[editor.session_key(newspaper.pk)] = state.to_session()


def _editor_response(state, status=200, **extra):
    payload = {'status': 'success', 'editor': state.to_session()}
    payload.update(extra)
    return JsonResponse(payload, status=status)


def _page_canvas(newspaper, page_number, scale):
    doc = open_document(newspaper)
    try:
        return page_count(doc), page_size(doc, page_number, scale)
    finally:
        doc.close()


@staff_member_required
@require_GET
def mapper(request, newspaper_id):
    newspaper = get_object_or_404(Newspaper, pk=newspaper_id)
    total_pages = _ensure_page_count(newspaper)
    page_number = _int_param(request.GET.get('page'), 1)
    if page_number < 1 or page_number > total_pages:
        return _error('Page number out of range.', status=404)

    state = _load_editor(request, newspaper)
    scale = state.scale if state else 1.0
    _, (canvas_width, canvas_height) = _page_canvas(newspaper, page_number, scale)
    if state is None:
        state = editor.new_session(page_number, canvas_width, canvas_height, scale)
    elif state.page_number != page_number:
        state = editor.change_page(state, page_number, canvas_width, canvas_height)
    _store_editor(request, newspaper, state)

    areas = list(MappedArea.objects.for_newspaper(newspaper))
    context = {
        'newspaper': newspaper,
        'page_number': page_number,
        'total_pages': total_pages,
        'previous_page': page_number - 1 if page_number > 1 else None,
        'next_page': page_number + 1 if page_number < total_pages else None,
        'editor_state': state.to_session(),
        'image_scale': round(state.scale * SNIPPET_PIXEL_RATIO, 2),
        'hotspots': project(areas, page_number),
        'form': MappedAreaForm(),
        'categories': Category.choices,
    }
    return render(request, 'newsmapper/mapper.html', context)


@staff_member_required
@require_POST
def mapper_pointer(request, newspaper_id):
    newspaper = get_object_or_404(Newspaper, pk=newspaper_id)
    state = _load_editor(request, newspaper)
    if state is None:
        return _error('Open the mapper before drawing.')
    data = _request_data(request)
    if data is None:
        return _error('Invalid JSON body.')

    event = data.get('event')
    x = _float_param(data.get('x'), None)
    y = _float_param(data.get('y'), None)
    if x is None or y is None:
        return _error('Pointer events need x and y.')

    if event == 'down':
        state = editor.pointer_down(state, x, y, over_shape=bool(data.get('overShape')))
    elif event == 'move':
        state = editor.pointer_move(state, x, y)
    elif event == 'up':
        state = editor.pointer_up(state, x, y)
    else:
        return _error(f'Unknown pointer event "{event}".')
    _store_editor(request, newspaper, state)
    return _editor_response(state)


@staff_member_required
@require_POST
def mapper_cancel(request, newspaper_id):
    newspaper = get_object_or_404(Newspaper, pk=newspaper_id)
    state = _load_editor(request, newspaper)
    if state is None:
        return _error('Open the mapper before cancelling.')
    state = editor.cancel(state)
    _store_editor(request, newspaper, state)
    return _editor_response(state)


@staff_member_required
@require_POST
def mapper_page(request, newspaper_id):
    newspaper = get_object_or_404(Newspaper, pk=newspaper_id)
    state = _load_editor(request, newspaper)
    data = _request_data(request)
    if state is None or data is None:
        return _error('Open the mapper before changing pages.')
    page_number = _int_param(data.get('page'), None)
    total_pages = _ensure_page_count(newspaper)
    if page_number is None or page_number < 1 or page_number > total_pages:
        return _error('Page number out of range.')
    _, (canvas_width, canvas_height) = _page_canvas(newspaper, page_number, state.scale)
    state = editor.change_page(state, page_number, canvas_width, canvas_height)
    _store_editor(request, newspaper, state)
    return _editor_response(state, redirect=f"{reverse('mapper', args=[newspaper.pk])}?page={page_number}")


@staff_member_required
@require_POST
def mapper_zoom(request, newspaper_id):
    newspaper = get_object_or_404(Newspaper, pk=newspaper_id)
    state = _load_editor(request, newspaper)
    data = _request_data(request)
    if state is None or data is None:
        return _error('Open the mapper before zooming.')
    scale = _float_param(data.get('scale'), None)
    if scale is None:
        return _error('Zoom needs a scale.')
    scale = _clamp_zoom(scale)
    _, (canvas_width, canvas_height) = _page_canvas(newspaper, state.page_number, scale)
    state = editor.change_zoom(state, scale, canvas_width, canvas_height)
    _store_editor(request, newspaper, state)
    return _editor_response(state, imageScale=round(scale * SNIPPET_PIXEL_RATIO, 2))


def _capture_snippet(newspaper, state, ticket):
    try:
        doc = open_document(newspaper)
    except (RuntimeError, OSError) as e:
        logger.error('Capture failed: cannot open PDF: %s', e)
        return None
    try:
        raster = render_page(doc, ticket.page_number, state.scale * SNIPPET_PIXEL_RATIO)
    except PageOutOfRange as e:
        logger.error('Capture failed: %s', e)
        raster = None
    finally:
        doc.close()
    return extract(ticket.coordinates, raster, ticket.canvas_size)


@staff_member_required
@require_POST
def mapper_save(request, newspaper_id):
    newspaper = get_object_or_404(Newspaper, pk=newspaper_id)
    state = _load_editor(request, newspaper)
    if state is None:
        return _error('Open the mapper before saving.')
    try:
        state, ticket = editor.begin_save(state)
    except editor.EditorError as e:
        return _error(str(e))
    _store_editor(request, newspaper, state)
    # persist the in-flight flag now so a second submit is rejected
    request.session.save()

    def fail(message, status, kind='error'):
        current = _load_editor(request, newspaper)
        _store_editor(request, newspaper, editor.finish_save(current, ticket, succeeded=False))
        return JsonResponse({'status': kind, 'message': message}, status=status)

    # every exit below must clear the in-flight flag
    try:
        form = MappedAreaForm(request.POST, request.FILES)
        if not form.is_valid():
            return fail(form.errors.as_text(), 400)

        image = form.cleaned_data.get('image')
        if image:
            image_data = uploaded_file_to_data_url(image)
        else:
            image_data = _capture_snippet(newspaper, state, ticket)
            if image_data is None:
                return fail('Could not capture snippet. Please upload one manually.', 422)

        if is_suspicious(image_data) and not form.cleaned_data['confirm']:
            return fail(
                f'Capture suspicious: data length is only {len(image_data)} bytes. Capture might have failed.',
                409, kind='warning',
            )

        payload = {
            'pageNumber': ticket.page_number,
            'headline': form.cleaned_data['headline'],
            'category': form.cleaned_data['category'],
            'imageData': image_data,
        }
        payload.update(ticket.coordinates.to_dict())
        area = MappedArea.objects.create_for(newspaper, payload)
    except Exception as e:
        logger.exception('Add mapped area failed: %s', e)
        return fail(f'Failed to map area: {e}', 500)

    logger.info('Saved area for "%s" on page %s. Snippet size: %s KB',
                area.headline, area.page_number, round(len(image_data) / 1024))
    current = _load_editor(request, newspaper)
    state = editor.finish_save(current, ticket, succeeded=True)
    _store_editor(request, newspaper, state)
    return _editor_response(state, status=201, area=area.to_record())
