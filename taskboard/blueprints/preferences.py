from flask import Blueprint, jsonify
from flask_login import login_required, current_user
from taskboard import db
from taskboard.errors import ValidationError
from taskboard.utils.defaults import MAX_CUSTOM_WALLPAPERS
from taskboard.utils.forms import json_body
from taskboard.utils.ids import is_valid_id

preferences_bp = Blueprint('preferences', __name__)


@preferences_bp.route('/user/preferences', methods=['GET'])
@login_required
def get_preferences():
    return jsonify(current_user.preferences())


@preferences_bp.route('/user/preferences', methods=['PUT'])
@login_required
def update_preferences():
    data = json_body()

    if 'lastActiveBoardId' in data:
        board_id = data['lastActiveBoardId']
        if board_id is not None and not is_valid_id(board_id):
            raise ValidationError('The board ID is not valid.')
        current_user.last_active_board_id = board_id

    if 'wallpaper' in data:
        wallpaper = data['wallpaper']
        if not isinstance(wallpaper, str) or not wallpaper.strip():
            raise ValidationError('The wallpaper must be a non-empty string.')
        current_user.wallpaper = wallpaper.strip()

    if 'customWallpapers' in data:
        urls = data['customWallpapers']
        if not isinstance(urls, list) or not all(isinstance(url, str) and url for url in urls):
            raise ValidationError('Custom wallpapers must be an array of URLs.')
        # Newest first; older entries past the limit are dropped
        current_user.custom_wallpapers = urls[:MAX_CUSTOM_WALLPAPERS]

    db.session.commit()
    return jsonify(current_user.preferences())
