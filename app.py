import logging

from flask import Flask, jsonify, request
from werkzeug.utils import secure_filename

from statementextractor import (
  PdfExtractionError,
  ReconstructorConfig,
  StatementExtractor,
  validate_file,
  validate_for_import,
)
from statementextractor.extractor import MAX_FILE_SIZE, NO_TRANSACTIONS_MESSAGE

logger = logging.getLogger(__name__)


def create_app(config=None):
  app = Flask(__name__)
  # Leave room for multipart overhead, the file itself is checked by validate_file
  app.config['MAX_CONTENT_LENGTH'] = MAX_FILE_SIZE + 1024 * 1024
  app.config['PDF_ENGINE'] = ReconstructorConfig.from_env().engine
  if config:
    app.config.update(config)

  @app.route('/statements/parse', methods=['POST'])
  def parse_statement():
    file = request.files.get('file')
    if file is None or file.filename == '':
      return jsonify({'success': False, 'error': 'No file selected'}), 400

    data = file.read()
    validation = validate_file({'type': file.mimetype, 'size': len(data)})
    if not validation.is_valid:
      return jsonify({'success': False, 'error': validation.error}), 400

    filename = secure_filename(file.filename)
    extractor = StatementExtractor(ReconstructorConfig(engine=app.config['PDF_ENGINE']))
    try:
      result = extractor.extract_with_report(data)
    except PdfExtractionError as e:
      logger.error(f"Error processing {filename}: {e}")
      return jsonify({'success': False, 'error': str(e)}), 422

    logger.info(f"Extracted {len(result.transactions)} transactions from {filename}")
    response = {
      'success': True,
      'transactions': [t.to_dict() for t in result.transactions],
      'count': len(result.transactions),
      'pages': result.page_count,
      'skipped_lines': [
        {'line_number': s.line_number, 'text': s.text, 'reason': s.reason}
        for s in result.skipped_lines
      ],
    }
    if result.is_empty:
      response['message'] = NO_TRANSACTIONS_MESSAGE
    return jsonify(response)

  @app.route('/statements/validate-import', methods=['POST'])
  def validate_import():
    payload = request.get_json(silent=True) or {}
    transactions = payload.get('transactions')
    if not isinstance(transactions, list):
      return jsonify({'success': False, 'error': 'Expected a list of transactions'}), 400

    validation = validate_for_import(transactions)
    return jsonify({'success': validation.is_valid, 'error': validation.error})

  @app.errorhandler(413)
  def too_large(e):
    return jsonify({'success': False, 'error': 'File size must be less than 10MB'}), 413

  return app


if __name__ == '__main__':
  logging.basicConfig(level=logging.INFO, format="%(levelname)s | %(message)s")
  create_app().run(debug=True, host='0.0.0.0', port=8080)
